# extensions/redis_client.py
import redis
from flask import current_app, has_app_context

_redis_client = None


def get_redis():
    global _redis_client
    if _redis_client is not None:
        return _redis_client
    url = "redis://127.0.0.1:6379/0"
    if has_app_context():
        url = current_app.config.get("REDIS_URL", url)
    _redis_client = redis.from_url(url)
    return _redis_client


def set_redis(client):
    """Swap the shared client (tests inject an in-process fake)."""
    global _redis_client
    _redis_client = client
