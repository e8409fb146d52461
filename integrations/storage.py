"""
S3 object retrieval for uploaded transaction exports.
"""
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from core.config import get_settings
from core.exceptions import StorageError
from core.logger import setup_logger
from integrations.aws import create_client, retrying

logger = setup_logger(__name__)


class S3ObjectStore:
    """Reads whole objects from S3 into memory."""

    def __init__(
        self,
        client: Optional[Any] = None,
        max_attempts: Optional[int] = None,
        backoff: float = 1.0,
    ):
        settings = get_settings()
        self._client = client
        self.region = settings.aws_region
        self.max_attempts = max_attempts or settings.aws_max_attempts
        self.backoff = backoff

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_client("s3", self.region)
        return self._client

    def fetch(self, bucket: str, key: str) -> bytes:
        """
        Download an object body.

        Args:
            bucket: Bucket name
            key: Object key (already URL-decoded)

        Returns:
            Raw object bytes

        Raises:
            StorageError: If the object cannot be read after retries
        """
        logger.info(f"Fetching s3://{bucket}/{key}")
        try:
            for attempt in retrying(self.max_attempts, self.backoff):
                with attempt:
                    response = self.client.get_object(Bucket=bucket, Key=key)
                    body = response["Body"]
                    try:
                        data = body.read()
                    finally:
                        body.close()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            logger.error(f"S3 returned {code} for s3://{bucket}/{key}")
            raise StorageError(
                f"Failed to fetch s3://{bucket}/{key}: {code}",
                details={"bucket": bucket, "key": key, "code": code}
            )
        except BotoCoreError as e:
            logger.error(f"S3 request failed for s3://{bucket}/{key}: {e}")
            raise StorageError(
                f"Failed to fetch s3://{bucket}/{key}",
                details={"bucket": bucket, "key": key, "error": str(e)}
            )

        logger.debug(f"Fetched {len(data)} bytes from s3://{bucket}/{key}")
        return data
