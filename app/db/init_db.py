"""
Create missing tables straight from the models.

Usage: ``python -m app.db.init_db``. Deployments should prefer
``alembic upgrade head``; this is the quick path for local databases.
"""

from asyncio import run as asyncio_run
from time import perf_counter

from app.db.database import close_db, init_db
from app.errors.database import DatabaseInitializationError
from app.monitoring import configure_logging, get_logger
from app.utils.helpers import time_taken

logger = get_logger(__name__)


async def main() -> None:
    configure_logging()
    started = perf_counter()
    try:
        await init_db()
        logger.info("Schema created", took=time_taken(started))
    except Exception as e:
        logger.exception("Could not create the users/posts schema")
        raise DatabaseInitializationError from e
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio_run(main())
