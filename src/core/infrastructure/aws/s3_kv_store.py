"""S3-backed implementation of KeyValueStore."""

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.models.errors import StorageFailureError
from core.repositories.kv_store import KeyValueStore

logger = Logger(UTC=True)

RECORD_CONTENT_TYPE = "application/json"


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3KeyValueStore(KeyValueStore):
    """Key-value store where each key is an object in one S3 bucket."""

    def __init__(self, adapter: S3Adapter | None = None) -> None:
        """Create the store using the provided S3 adapter."""
        self._s3 = adapter or S3Adapter()

    def get(self, key: str) -> str | None:
        """Read an object body as text, or ``None`` when it does not exist."""
        logger.debug("Reading record", extra={"key": key})

        try:
            response = self._s3.get_object(key=key)
            body: bytes = response["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in ("NoSuchKey", "404"):
                return None

            logger.error("S3 read failed", extra={"key": key})
            raise StorageFailureError(
                message=str(exc),
                details={"key": key},
            ) from exc
        except BotoCoreError as exc:
            logger.exception("Unexpected error reading record")
            raise StorageFailureError(
                message=str(exc),
                details={"key": key},
            ) from exc

        return body.decode("utf-8")

    def put(self, key: str, value: str) -> None:
        """Write a record object, replacing any existing one."""
        logger.debug("Writing record", extra={"key": key, "length": len(value)})

        try:
            self._s3.put_object(
                key=key,
                body=value.encode("utf-8"),
                content_type=RECORD_CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 write failed", extra={"key": key})
            raise StorageFailureError(
                message=str(exc),
                details={"key": key},
            ) from exc

        logger.info("Record stored", extra={"key": key})

    def list_keys(self) -> list[str]:
        """Return every key in the bucket."""
        try:
            return list(self._s3.iter_keys())
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 enumeration failed", extra={"bucket": self._s3.bucket})
            raise StorageFailureError(
                message=str(exc),
                details={"bucket": self._s3.bucket},
            ) from exc

    def delete(self, key: str) -> None:
        """Delete a record object."""
        try:
            self._s3.delete_object(key=key)
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 deletion failed", extra={"key": key})
            raise StorageFailureError(
                message=str(exc),
                details={"key": key},
            ) from exc

        logger.info("Record deleted", extra={"key": key})
