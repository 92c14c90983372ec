"""Lazy-initialized database client, a connection pool shared by every service call in the process."""

from functools import lru_cache

from core.config import get_config
from core.db.postgres import PostgresClient


@lru_cache(maxsize=1)
def get_db_client() -> PostgresClient:
    client = PostgresClient(get_config())
    client.connect()
    return client
