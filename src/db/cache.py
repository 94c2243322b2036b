import logging
from typing import Optional

import redis

from config.settings import settings

logger = logging.getLogger(__name__)

_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """
    Returns the shared Redis client, creating it on first use.

    Creating the client does not open a connection; failures surface as
    RedisError on the first command.
    """
    global _redis_client
    if _redis_client is None:
        logger.info(f"Creating Redis client for {settings.redis_url}")
        # Use decode_responses=True to automatically decode responses from bytes to strings
        _redis_client = redis.Redis.from_url(settings.redis_url, decode_responses=True)
    return _redis_client


def close_redis_client() -> None:
    global _redis_client
    if _redis_client is not None:
        try:
            _redis_client.close()
            logger.info("Redis client closed.")
        except redis.exceptions.RedisError as e:
            logger.warning(f"Error closing Redis client: {e}")
        _redis_client = None
