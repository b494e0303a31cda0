from __future__ import annotations

import asyncio
import logging

from modules.common.runtime import Runtime
from shared.config import load_settings

log = logging.getLogger("vvgo.app")


async def main() -> None:
    runtime = Runtime(load_settings())
    await runtime.serve_forever()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("shutting down")
