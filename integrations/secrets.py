"""
Delivery credentials from AWS Secrets Manager.
The secret string is a JSON object with username, password and host.
"""
import json
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from core.config import get_settings
from core.exceptions import CredentialError
from core.logger import register_secret, setup_logger
from core.schema import EmailCredentials
from integrations.aws import create_client, retrying

logger = setup_logger(__name__)


class SecretsManagerCredentials:
    """Looks up SMTP credentials by secret id."""

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
            self._client = create_client("secretsmanager", self.region)
        return self._client

    def get_email_credentials(self, secret_id: str) -> EmailCredentials:
        """
        Fetch and decode the e-mail credentials secret.

        Raises:
            CredentialError: If the secret is unreachable, not a JSON string,
                or lacks any of username, password, host
        """
        try:
            for attempt in retrying(self.max_attempts, self.backoff):
                with attempt:
                    response = self.client.get_secret_value(SecretId=secret_id)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            logger.error(f"Secrets Manager returned {code} for {secret_id}")
            raise CredentialError(
                f"Failed to read secret {secret_id}: {code}",
                details={"secret_id": secret_id, "code": code}
            )
        except BotoCoreError as e:
            logger.error(f"Secrets Manager request failed for {secret_id}: {e}")
            raise CredentialError(
                f"Failed to read secret {secret_id}",
                details={"secret_id": secret_id, "error": str(e)}
            )

        secret_string = response.get("SecretString")
        if not secret_string:
            raise CredentialError(
                f"Secret {secret_id} has no string value",
                details={"secret_id": secret_id}
            )

        try:
            credentials = EmailCredentials(**json.loads(secret_string))
        except (json.JSONDecodeError, TypeError) as e:
            raise CredentialError(
                f"Secret {secret_id} is not a JSON object",
                details={"secret_id": secret_id, "error": str(e)}
            )
        except ValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise CredentialError(
                f"Secret {secret_id} is missing required fields",
                details={"secret_id": secret_id, "fields": missing}
            )

        register_secret(credentials.password)
        logger.info(f"Loaded e-mail credentials for {credentials.username} on {credentials.host}")
        return credentials
