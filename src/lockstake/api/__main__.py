# src/lockstake/api/__main__.py
from __future__ import annotations

import os

import uvicorn

from lockstake.env import load_dotenv_if_present


def main() -> None:
    # Load .env early so LOCKSTAKE_* vars exist before anything reads them.
    load_dotenv_if_present()

    # Import after dotenv load (prevents "config read before env" surprises)
    from lockstake.api.app import create_app
    from lockstake.api.structured_logging import configure_structured_logging
    from lockstake.runtime.engine_boot import build_engine
    from lockstake.runtime.pool_config import load_pool_config

    cfg = load_pool_config()
    os.environ.setdefault("LOCKSTAKE_MODE", cfg.mode)
    configure_structured_logging(cfg.log_level)

    host = os.getenv("LOCKSTAKE_API_HOST", cfg.api_host)
    port = int(os.getenv("LOCKSTAKE_API_PORT", str(cfg.api_port)))

    uvicorn.run(create_app(engine=build_engine(cfg)), host=host, port=port, log_level="info")


if __name__ == "__main__":
    main()
