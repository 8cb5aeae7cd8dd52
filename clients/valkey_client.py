"""
Valkey (Redis-compatible) client for session storage.

Thin wrapper around redis-py. Connection URL comes from Vault. Every key is
namespaced so several deployments can share one Valkey instance. Fail-fast:
raises on connection failure, never returns fallback values.
"""

import json
import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Redis-compatible client for Valkey.

    Usage:
        client = ValkeyClient("redis://localhost:6379/0", namespace="bookings")
        client.set_json("session:abc", {"user_id": "..."}, expire_seconds=300)
        data = client.get_json("session:abc")  # None if missing
    """

    def __init__(self, url: str, namespace: str = "bookings"):
        """
        Connect and verify the server answers.

        Args:
            url: Redis-compatible connection URL
            namespace: Prefix applied to every key

        Raises:
            redis.ConnectionError: If connection fails
        """
        self._client = redis.from_url(url, decode_responses=True)
        self._namespace = namespace
        self._client.ping()
        logger.info("ValkeyClient connected (namespace=%s)", namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def get(self, key: str) -> str | None:
        """Value for key, or None if absent."""
        return self._client.get(self._key(key))

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        """
        Store a value, optionally with expiration.

        Args:
            key: Key within the namespace
            value: Value to store
            expire_seconds: TTL in seconds (None for no expiration)
        """
        if expire_seconds is not None:
            self._client.setex(self._key(key), expire_seconds, value)
        else:
            self._client.set(self._key(key), value)

    def delete(self, key: str) -> bool:
        """Delete key. Returns False if it didn't exist."""
        return self._client.delete(self._key(key)) > 0

    def set_json(self, key: str, value: dict | list, expire_seconds: int | None = None) -> None:
        """Store a JSON-serialized value."""
        self.set(key, json.dumps(value), expire_seconds)

    def get_json(self, key: str) -> dict | list | None:
        """
        Load a JSON value.

        Returns None if key doesn't exist.
        Raises ValueError if the stored value is not valid JSON.
        """
        value = self.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in key '{key}': {e}") from e

    def close(self) -> None:
        """Close the connection."""
        self._client.close()
        logger.info("ValkeyClient closed")
