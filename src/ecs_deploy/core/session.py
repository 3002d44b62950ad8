"""AWS session and client construction, including scoped role assumption."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Literal

import boto3
from botocore.config import Config
from botocore.exceptions import NoRegionError, ProfileNotFound

from .errors import ArgumentError, CredentialsError, aws_errors
from .utils import print_info

if TYPE_CHECKING:
    from mypy_boto3_ecs import ECSClient
    from mypy_boto3_sts.client import STSClient

    from .config import DeployConfig

CLIENT_CONFIG = Config(
    max_pool_connections=5,
    retries={"max_attempts": 2, "mode": "adaptive"},
)


def create_session(profile_name: str | None = None, region_name: str | None = None) -> boto3.Session:
    """Create a boto3 session and make sure it can find credentials."""
    try:
        session = boto3.Session(profile_name=profile_name, region_name=region_name)
    except ProfileNotFound as e:
        raise ArgumentError(f"{e}. Check -p/--profile or AWS_PROFILE") from e
    if session.get_credentials() is None:
        raise CredentialsError("No AWS credentials found. Configure a profile, environment variables or a role.")
    return session


def create_ecs_client(session: boto3.Session) -> ECSClient:
    """Create optimized AWS ECS client with connection pooling."""
    return _create_client(session, "ecs")


def _create_sts_client(session: boto3.Session) -> STSClient:
    return _create_client(session, "sts")


def _create_client(session: boto3.Session, service_name: Literal["ecs", "sts"]) -> Any:
    try:
        return session.client(service_name, config=CLIENT_CONFIG)  # type: ignore[call-overload]
    except NoRegionError as e:
        raise ArgumentError(f"{e} Pass -r/--region or set AWS_DEFAULT_REGION") from e


@contextmanager
def assumed_role(session: boto3.Session, role_arn: str, session_name: str) -> Iterator[boto3.Session]:
    """Yield a session using temporary credentials for ``role_arn``.

    Leaving the block is the release. Callers must not keep the session past
    it, and the release is reported on every exit path.
    """
    with aws_errors("AssumeRole"):
        response = _create_sts_client(session).assume_role(RoleArn=role_arn, RoleSessionName=session_name)
    credentials = response["Credentials"]
    assumed = boto3.Session(
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
        region_name=session.region_name,
    )
    print_info(f"Assumed role {role_arn}")
    try:
        yield assumed
    finally:
        print_info(f"Released credentials for role {role_arn}")


@contextmanager
def aws_session(config: DeployConfig) -> Iterator[boto3.Session]:
    """Session for the whole run, scoped to an assumed role when one is configured."""
    session = create_session(config.profile, config.region)
    if not config.assume_role:
        yield session
        return
    with assumed_role(session, config.assume_role, config.assume_role_session_name) as assumed:
        yield assumed
