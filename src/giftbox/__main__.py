"""Gift Box entrypoint.

Run with:
  python -m giftbox
"""

import logging
import os

import uvicorn

from giftbox import config


def main() -> None:
    logging.basicConfig(
        level=os.getenv("GIFTBOX_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.getenv("GIFTBOX_HOST", "0.0.0.0")
    port = int(os.getenv("GIFTBOX_PORT", os.getenv("PORT", "3000")))
    reload = config.env_flag("GIFTBOX_RELOAD")
    uvicorn.run("giftbox.app:app", host=host, port=port, reload=reload)

if __name__ == "__main__":
    main()
