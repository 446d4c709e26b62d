"""
Create the session schema.

Run: python -m toad_architect.scripts.create_tables

Dependencies: toad_architect.boundary.db
"""

import asyncio
import logging

from toad_architect.boundary.db import dispose_engine, init_models
from toad_architect.configs import get_settings
from toad_architect.observability import configure_logging

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    try:
        await init_models()
        logger.info("Session tables created")
    finally:
        await dispose_engine()


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    asyncio.run(create_tables())
