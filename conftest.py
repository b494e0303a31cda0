# Keep the repository root importable (``shared``/``modules`` are namespace
# packages) when pytest starts from a subdirectory.
import os
import sys

_ROOT = os.path.dirname(os.path.abspath(__file__))
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)
