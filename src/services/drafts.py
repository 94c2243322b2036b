import logging
from typing import Optional

import redis
from pydantic import ValidationError

from config.settings import settings
from services.suitability_engine.models import AssessmentDraft
from src.db.cache import get_redis_client

logger = logging.getLogger(__name__)

NAMESPACE = "suitability:draft:"


class DraftStore:
    """
    Keeps in-progress assessments in Redis, keyed by session id.

    Redis failures are logged and reported through the return value
    (False / None) instead of being raised.
    """
    def __init__(self, client: redis.Redis, ttl_seconds: Optional[int] = None):
        self.client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(session_id: str) -> str:
        return f"{NAMESPACE}{session_id}"

    def save(self, draft: AssessmentDraft) -> bool:
        key = self.key(draft.session_id)
        try:
            self.client.set(key, draft.model_dump_json(), ex=self.ttl_seconds)
            logger.debug(f"Draft saved: key='{key}', expiry={self.ttl_seconds}s")
            return True
        except redis.exceptions.RedisError as e:
            logger.error(f"Error saving draft '{key}': {e}")
            return False

    def load(self, session_id: str) -> Optional[AssessmentDraft]:
        key = self.key(session_id)
        try:
            raw = self.client.get(key)
        except redis.exceptions.RedisError as e:
            logger.error(f"Error loading draft '{key}': {e}")
            return None
        if raw is None:
            logger.debug(f"Draft miss: key='{key}'")
            return None
        try:
            return AssessmentDraft.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable draft '{key}': {e.error_count()} validation error(s)")
            return None

    def delete(self, session_id: str) -> bool:
        key = self.key(session_id)
        try:
            return bool(self.client.delete(key))
        except redis.exceptions.RedisError as e:
            logger.error(f"Error deleting draft '{key}': {e}")
            return False


def get_draft_store() -> DraftStore:
    """FastAPI dependency returning a store on the shared Redis client."""
    return DraftStore(get_redis_client(), ttl_seconds=settings.draft_ttl_seconds)
