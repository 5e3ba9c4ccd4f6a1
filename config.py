"""
Configuration module for environment variable validation and type-safe config.

Credentials are carried as an immutable ``AWSCredentials`` value and handed to
each service explicitly, instead of being written into process-wide state
before every call.
"""
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from logger_config import set_log_level

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class AWSCredentials:
    """Explicit credentials and region for boto3 clients."""

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: str = "us-east-1"
    session_token: Optional[str] = None

    def client_kwargs(self) -> Dict[str, Any]:
        """
        Keyword arguments for ``boto3.client`` / ``boto3.resource``.

        Keys that are not set are left out so boto3 falls back to its
        default credential chain.
        """
        kwargs: Dict[str, Any] = {"region_name": self.region}
        if self.access_key_id and self.secret_access_key:
            kwargs["aws_access_key_id"] = self.access_key_id
            kwargs["aws_secret_access_key"] = self.secret_access_key
            if self.session_token:
                kwargs["aws_session_token"] = self.session_token
        return kwargs

    def __repr__(self) -> str:
        secret = "****" if self.secret_access_key else None
        return (
            f"AWSCredentials(access_key_id={self.access_key_id!r}, "
            f"secret_access_key={secret!r}, region={self.region!r})"
        )


@dataclass
class Config:
    """Type-safe configuration object with validated environment variables."""

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None
    aws_region: str = "us-east-1"
    log_level: str = "INFO"
    http_timeout: float = 30.0
    drain_max_iterations: Optional[int] = None

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create Config instance from environment variables.

        Raises:
            ValueError: If environment variables are inconsistent or invalid.
        """
        aws_access_key_id = os.environ.get("AWS_ACCESS_KEY_ID") or None
        aws_secret_access_key = os.environ.get("AWS_SECRET_ACCESS_KEY") or None
        if bool(aws_access_key_id) != bool(aws_secret_access_key):
            raise ValueError(
                "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set together"
            )

        aws_session_token = os.environ.get("AWS_SESSION_TOKEN") or None
        aws_region = os.environ.get("AWS_REGION", "us-east-1")
        log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

        if log_level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {VALID_LOG_LEVELS}, got: {log_level}"
            )

        raw_timeout = os.environ.get("HTTP_TIMEOUT", "30")
        try:
            http_timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(
                f"HTTP_TIMEOUT must be a number of seconds, got: {raw_timeout}"
            ) from None
        if http_timeout <= 0:
            raise ValueError(
                f"HTTP_TIMEOUT must be positive, got: {raw_timeout}"
            )

        drain_max_iterations = None
        raw_iterations = os.environ.get("DRAIN_MAX_ITERATIONS")
        if raw_iterations:
            try:
                drain_max_iterations = int(raw_iterations)
            except ValueError:
                drain_max_iterations = 0
            if drain_max_iterations < 1:
                raise ValueError(
                    "DRAIN_MAX_ITERATIONS must be a positive integer, "
                    f"got: {raw_iterations}"
                )

        return cls(
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            aws_session_token=aws_session_token,
            aws_region=aws_region,
            log_level=log_level,
            http_timeout=http_timeout,
            drain_max_iterations=drain_max_iterations,
        )

    def credentials(self) -> AWSCredentials:
        """Immutable credentials value for the AWS services."""
        return AWSCredentials(
            access_key_id=self.aws_access_key_id,
            secret_access_key=self.aws_secret_access_key,
            region=self.aws_region,
            session_token=self.aws_session_token,
        )


_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    The first call also applies ``log_level`` to the package loggers.

    Returns:
        Config: The validated configuration object

    Raises:
        ValueError: If environment variables are missing or invalid.
    """
    global _config
    if _config is None:
        _config = Config.from_env()
        set_log_level(_config.log_level)
    return _config
