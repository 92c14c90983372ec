import json
from os import environ

import boto3
from pydantic import BaseModel, ConfigDict, Field

_cached_db_secret: dict[str, str] | None = None


def _resolve_db_secret(secret_arn: str | None, region: str) -> dict[str, str]:
    """Fetch database credentials from Secrets Manager at runtime, with caching."""
    global _cached_db_secret
    if _cached_db_secret is not None:
        return _cached_db_secret

    # Local dev: credentials come from plain env vars
    if not secret_arn:
        return {}

    client = boto3.client("secretsmanager", region_name=region)
    _cached_db_secret = json.loads(client.get_secret_value(SecretId=secret_arn)["SecretString"])
    return _cached_db_secret


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    db_secret_arn: str | None = None
    db_statement_timeout_ms: int | None = None
    db_pool_min_size: int = Field(default=1, ge=0)
    db_pool_max_size: int = Field(default=10, ge=1)
    default_tax_rate: float = Field(default=0.089, ge=0.0, le=1.0)
    environment: str


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config — for testing only."""
    global _cached_config, _cached_db_secret
    _cached_config = None
    _cached_db_secret = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    region = environ.get("AWS_REGION", "us-east-1")
    secret_arn = environ.get("DB_SECRET_ARN")
    secret = _resolve_db_secret(secret_arn, region)
    timeout = environ.get("DB_STATEMENT_TIMEOUT_MS")

    _cached_config = Config(
        aws_region=region,
        db_host=secret.get("host", environ.get("DB_HOST", "localhost")),
        db_port=int(secret.get("port", environ.get("DB_PORT", "5432"))),
        db_name=secret.get("dbname", environ.get("DB_NAME", "proposals")),
        db_user=secret.get("username", environ.get("DB_USER", "proposals")),
        db_password=secret.get("password", environ.get("DB_PASSWORD", "localdev")),
        db_secret_arn=secret_arn,
        db_statement_timeout_ms=int(timeout) if timeout else None,
        db_pool_min_size=int(environ.get("DB_POOL_MIN_SIZE", "1")),
        db_pool_max_size=int(environ.get("DB_POOL_MAX_SIZE", "10")),
        default_tax_rate=float(environ.get("DEFAULT_TAX_RATE", "0.089")),
        environment=environ.get("ENVIRONMENT", "local"),
    )
    return _cached_config
