import logging
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
import redis as _redis

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()

# Initialized lazily in create_app; None means page caching is disabled
redis_client: _redis.Redis = None  # type: ignore


def init_redis(app):
    global redis_client
    redis_url = app.config.get("REDIS_URL", "")
    if not redis_url:
        logger.warning("REDIS_URL not set, page cache disabled")
        redis_client = None
        return

    try:
        client = _redis.from_url(redis_url, decode_responses=False)
        client.ping()
        redis_client = client
    except Exception as e:
        logger.warning("Redis connection failed (%s), page cache disabled", e)
        redis_client = None
