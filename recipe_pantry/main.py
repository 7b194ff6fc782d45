# Recipe pantry bootstrap
import logging
import sys
from typing import Optional

from .db import Database
from .services.kitchen import Kitchen
from .settings import Settings, settings as default_settings

logger = logging.getLogger("recipe_pantry")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or default_settings.log_level).upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def create_kitchen(settings: Optional[Settings] = None, *, create_schema: bool = True) -> Kitchen:
    """Connect to the configured database and wire up a Kitchen.

    The caller owns the result and must close() it (or use it as a
    context manager) to dispose of the engine.
    """
    cfg = settings or default_settings
    configure_logging(cfg.log_level)

    db = Database(cfg.database_url, echo=cfg.database_echo)
    db.connect()
    if create_schema:
        db.create_all()
    logger.info("Kitchen ready")
    return Kitchen(db)
