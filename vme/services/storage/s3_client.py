# vme/services/storage/s3_client.py
from __future__ import annotations

import re
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import Any, Iterator, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, SecretStr

from vme.common.logging import get_logger
from vme.common.settings import get_settings
from vme.domain.errors import InvalidInputError, ObjectStoreError
from vme.domain.ports.storage import ObjectStorePort

logger = get_logger(__name__)

S3_SCHEME = "s3"
ACCESS_KEY_ENV = "VME_S3_ACCESS_KEY"
SECRET_KEY_ENV = "VME_S3_SECRET_KEY"
# bucket names, including legacy us-east-1 ones with uppercase or underscores
_BUCKET_NAME = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class S3Config(BaseModel):
    bucket: str
    region: str = "us-east-1"
    endpoint: Optional[str] = None
    use_ssl: bool = True
    access_key: Optional[SecretStr] = None
    secret_key: Optional[SecretStr] = None

    @property
    def has_credentials(self) -> bool:
        return bool(
            self.access_key and self.access_key.get_secret_value()
            and self.secret_key and self.secret_key.get_secret_value()
        )


def parse_s3_uri(uri: str) -> Tuple[str, str]:
    """
    Split `s3://bucket/key` into (bucket, key).
    Raises InvalidInputError for anything else; no network access.
    """
    if not uri or not isinstance(uri, str):
        raise InvalidInputError("empty S3 URI")
    prefix = f"{S3_SCHEME}://"
    if not uri.startswith(prefix):
        raise InvalidInputError(f"invalid S3 URI {uri!r}: expected s3://bucket/key")
    # everything after the first '/' is the key, '?' and '#' included
    bucket, sep, key = uri[len(prefix):].partition("/")
    if not sep:
        raise InvalidInputError(f"invalid S3 URI {uri!r}: expected s3://bucket/key")
    if not bucket:
        raise InvalidInputError(f"invalid S3 URI {uri!r}: missing bucket")
    if not _BUCKET_NAME.fullmatch(bucket):
        raise InvalidInputError(f"invalid S3 URI {uri!r}: bad bucket name {bucket!r}")
    if not key or key.endswith("/"):
        raise InvalidInputError(f"invalid S3 URI {uri!r}: missing object key")
    return bucket, key


def load_s3_config(
    bucket: str,
    *,
    region: Optional[str] = None,
    endpoint: Optional[str] = None,
    use_ssl: Optional[bool] = None,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
) -> S3Config:
    """
    Build an S3Config from explicit values, falling back to settings for
    connection details and to VME_S3_ACCESS_KEY / VME_S3_SECRET_KEY for
    credentials. Missing credentials are an input error.
    """
    if not bucket:
        raise InvalidInputError("S3 bucket name is required")
    cfg = get_settings()
    ak = SecretStr(access_key) if access_key else cfg.s3_access_key
    sk = SecretStr(secret_key) if secret_key else cfg.s3_secret_key
    s3cfg = S3Config(
        bucket=bucket,
        region=region or cfg.s3.region,
        endpoint=endpoint or cfg.s3.endpoint,
        use_ssl=cfg.s3.use_ssl if use_ssl is None else use_ssl,
        access_key=ak,
        secret_key=sk,
    )
    if not s3cfg.has_credentials:
        raise InvalidInputError(
            f"S3 access key and secret key must be set via {ACCESS_KEY_ENV} and {SECRET_KEY_ENV} environment variables"
        )
    return s3cfg


class S3Client(ObjectStorePort):
    """
    Thin boto3 wrapper bound to one bucket.
    Any authentication, network or transfer failure becomes ObjectStoreError.
    """

    def __init__(self, config: S3Config, client: Any = None):
        self.config = config
        self.bucket = config.bucket
        self._client = client or self._make_client(config)

    @staticmethod
    def _make_client(config: S3Config) -> Any:
        kwargs: dict = {
            "region_name": config.region,
            "use_ssl": config.use_ssl,
            "aws_access_key_id": config.access_key.get_secret_value() if config.access_key else None,
            "aws_secret_access_key": config.secret_key.get_secret_value() if config.secret_key else None,
        }
        if config.endpoint:
            kwargs["endpoint_url"] = config.endpoint
            # path-style addressing for MinIO and other S3-compatible services
            kwargs["config"] = Config(s3={"addressing_style": "path"})
        try:
            return boto3.client("s3", **kwargs)
        except (BotoCoreError, ValueError) as e:
            raise ObjectStoreError(f"failed to create S3 client: {e}") from e

    def upload(self, local_path: Path | str, key: str) -> None:
        local_path = Path(local_path)
        if not local_path.is_file():
            raise ObjectStoreError(f"failed to open file {local_path}: not a file")
        logger.info("uploading %s to s3://%s/%s", local_path, self.bucket, key)
        try:
            self._client.upload_file(str(local_path), self.bucket, key)
        except (BotoCoreError, ClientError, OSError) as e:
            raise ObjectStoreError(f"failed to upload file to S3: {e}") from e

    def download(self, key: str, dest_dir: Optional[Path | str] = None) -> Path:
        """
        Fetch `key` into `dest_dir` (a fresh temp dir when None) under the
        key's base name, and return the local path. On failure the partial
        file is removed; a temp dir created here is removed as well.
        """
        own_dir = dest_dir is None
        target_dir = Path(tempfile.mkdtemp(prefix="vme-download-")) if own_dir else Path(dest_dir)
        target = target_dir / (PurePosixPath(key).name or "object")
        logger.info("downloading s3://%s/%s to %s", self.bucket, key, target)
        try:
            with target.open("wb") as fh:
                self._client.download_fileobj(self.bucket, key, fh)
        except (BotoCoreError, ClientError, OSError) as e:
            target.unlink(missing_ok=True)
            if own_dir:
                shutil.rmtree(target_dir, ignore_errors=True)
            raise ObjectStoreError(f"failed to get object from S3: {e}") from e
        return target


@contextmanager
def s3_input(uri: str, config: S3Config, client: Optional[S3Client] = None) -> Iterator[Path]:
    """
    Download the object behind `uri` for the duration of the `with` block.
    The temporary directory is removed on every exit path.
    """
    bucket, key = parse_s3_uri(uri)
    if config.bucket != bucket:
        config = config.model_copy(update={"bucket": bucket})
    s3 = client or S3Client(config)
    with tempfile.TemporaryDirectory(prefix="vme-download-") as tmp:
        yield s3.download(key, dest_dir=Path(tmp))
