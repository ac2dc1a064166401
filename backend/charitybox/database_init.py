# charitybox/database_init.py
import logging

from sqlalchemy.engine import make_url
from sqlalchemy_utils import database_exists, create_database

logger = logging.getLogger(__name__)


def ensure_database(url: str):
    if not database_exists(url):
        create_database(url)
        logger.info("Database created: %s", safe_url(url))
    else:
        logger.info("Database already exists: %s", safe_url(url))


def safe_url(url: str) -> str:
    return make_url(url).render_as_string(hide_password=True)
