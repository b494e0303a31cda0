import logging
import os
from typing import Optional

log = logging.getLogger("vvgo.ports")


def get_port(env_var: str = "PORT", fallback: int = 10000) -> int:
    """Read the HTTP listen port (Render/Heroku style), falling back on junk."""
    val: Optional[str] = os.getenv(env_var)
    if not val:
        return int(fallback)
    try:
        return int(val)
    except ValueError:
        log.warning("%s=%r is not a port number; using %s", env_var, val, fallback)
        return int(fallback)
