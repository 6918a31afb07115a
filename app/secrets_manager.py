import json
import os
import time
from typing import Any, Callable, Dict, Optional
import logging

import boto3

logger = logging.getLogger(__name__)

DEFAULT_DB_SECRET_NAME = "bemore/database"


class SecretsManager:
    """
    Reads credentials from AWS Secrets Manager and keeps them in a
    TTL cache so rotated values are picked up without a restart.
    """

    def __init__(self, region_name: Optional[str] = None, cache_ttl: int = 300):
        """
        Args:
            region_name: AWS region name, defaults to the AWS_REGION env variable
            cache_ttl: Seconds a fetched secret stays fresh
        """
        self.region_name = region_name or os.environ.get("AWS_REGION", "us-east-1")
        self._client = None
        self._cache: Dict[str, Any] = {}
        self._cache_timestamps: Dict[str, float] = {}
        self._cache_ttl = cache_ttl

    @property
    def client(self):
        """Lazy-loaded Secrets Manager client"""
        if self._client is None:
            session = boto3.session.Session()
            self._client = session.client(
                service_name="secretsmanager",
                region_name=self.region_name
            )
        return self._client

    def _cached(self, secret_id: str, fetch: Callable[[str], Any]) -> Any:
        now = time.time()
        fetched_at = self._cache_timestamps.get(secret_id)
        if fetched_at is not None and now - fetched_at < self._cache_ttl:
            logger.debug(f"Returning cached secret for {secret_id}")
            return self._cache[secret_id]

        logger.info(f"Fetching fresh secret for {secret_id}")
        try:
            value = fetch(secret_id)
        except Exception as e:
            # A stale value beats failing the caller outright
            if secret_id in self._cache:
                logger.warning(f"Fresh secret fetch failed for {secret_id}, using stale cache: {e}")
                return self._cache[secret_id]
            raise

        self._cache[secret_id] = value
        self._cache_timestamps[secret_id] = now
        return value

    def _fetch_secret(self, secret_id: str) -> str:
        try:
            response = self.client.get_secret_value(SecretId=secret_id)
        except Exception as e:
            logger.error(f"Failed to get secret {secret_id}: {e}")
            raise
        if "SecretBinary" in response:
            return response["SecretBinary"]
        return response["SecretString"]

    def clear_cache(self):
        """Clear the secrets cache to force fresh retrieval."""
        logger.info("Clearing secrets cache")
        self._cache.clear()
        self._cache_timestamps.clear()

    def get_secret(self, secret_id: str) -> str:
        """
        Get a secret value, served from cache while it is fresh.

        Args:
            secret_id: The secret ID or ARN

        Returns:
            The secret value as a string
        """
        return self._cached(secret_id, self._fetch_secret)

    def get_json_secret(self, secret_id: str) -> Dict[str, Any]:
        """Get a JSON secret and parse it."""
        return json.loads(self.get_secret(secret_id))

    def get_db_credentials(self) -> Dict[str, str]:
        """
        Get PostgreSQL credentials (username, password, host, port, dbname).
        The secret name comes from DATABASE_SECRETS_NAME.
        """
        return self.get_json_secret(os.environ.get("DATABASE_SECRETS_NAME", DEFAULT_DB_SECRET_NAME))
