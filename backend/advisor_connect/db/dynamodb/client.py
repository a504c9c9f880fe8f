from __future__ import annotations

from functools import lru_cache

import boto3
from botocore.config import Config

from ...settings import settings


@lru_cache(maxsize=1)
def botocore_config() -> Config:
    # Short timeouts: every call sits on a request path. ddb_call retries
    # throttling on top of botocore's own standard retries.
    return Config(
        retries={"max_attempts": 3, "mode": "standard"},
        connect_timeout=2,
        read_timeout=5,
    )


@lru_cache(maxsize=1)
def dynamodb_resource():
    kwargs = {"region_name": settings.aws_region, "config": botocore_config()}
    # DDB_ENDPOINT_URL points at DynamoDB Local for development.
    if settings.ddb_endpoint_url:
        kwargs["endpoint_url"] = settings.ddb_endpoint_url
    return boto3.resource("dynamodb", **kwargs)


def table_resource(table_name: str):
    return dynamodb_resource().Table(table_name)
