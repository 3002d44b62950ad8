"""Error taxonomy and exit codes for ecs-deploy."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from enum import IntEnum

from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError, PartialCredentialsError


class ExitCode(IntEnum):
    """Process exit codes, one per failure class."""

    OK = 0
    FAILURE = 1
    BAD_ARGUMENTS = 2
    NO_CREDENTIALS = 3
    API_ERROR = 4
    ROLLBACK_FAILED = 5
    MISSING_DOMAIN_OR_REPO = 10
    MISSING_IMAGE_NAME = 11
    UNPARSEABLE_IMAGE = 13
    INVALID_SOURCE_DOCUMENT = 14
    DEPLOYMENT_TIMEOUT = 20
    TASK_RUN_TIMEOUT = 21
    TASK_EXECUTION_FAILED = 30


class DeployError(Exception):
    """Base class for every failure surfaced to the invoker."""

    exit_code = ExitCode.FAILURE


class ArgumentError(DeployError):
    exit_code = ExitCode.BAD_ARGUMENTS


class CredentialsError(DeployError):
    exit_code = ExitCode.NO_CREDENTIALS


class ParseError(DeployError):
    exit_code = ExitCode.UNPARSEABLE_IMAGE


class MissingDomainOrRepoError(ParseError):
    exit_code = ExitCode.MISSING_DOMAIN_OR_REPO


class MissingImageNameError(ParseError):
    exit_code = ExitCode.MISSING_IMAGE_NAME


class UnparseableImageError(ParseError):
    exit_code = ExitCode.UNPARSEABLE_IMAGE


class InvalidSourceDocumentError(ParseError):
    exit_code = ExitCode.INVALID_SOURCE_DOCUMENT


class ApiError(DeployError):
    """A request to AWS was rejected or could not be sent."""

    exit_code = ExitCode.API_ERROR

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed - {message}")
        self.operation = operation


class RegistrationError(ApiError):
    pass


class RollbackFailedError(ApiError):
    exit_code = ExitCode.ROLLBACK_FAILED


class DeploymentTimeoutError(DeployError):
    exit_code = ExitCode.DEPLOYMENT_TIMEOUT

    def __init__(self, message: str, rolled_back: bool = False) -> None:
        super().__init__(message)
        self.rolled_back = rolled_back


class TaskRunTimeoutError(DeployError):
    exit_code = ExitCode.TASK_RUN_TIMEOUT


class TaskExecutionFailedError(DeployError):
    exit_code = ExitCode.TASK_EXECUTION_FAILED

    def __init__(self, task_arn: str, container_exit_code: int | None) -> None:
        super().__init__(f"Task {task_arn} failed with exit code {container_exit_code}")
        self.task_arn = task_arn
        self.container_exit_code = container_exit_code


def describe_aws_error(error: Exception) -> str:
    """Render a botocore exception as an actionable one-line message."""
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        code = details.get("Code", "Unknown")
        message = details.get("Message", str(error))
        return f"{code}: {message}"
    return str(error)


@contextmanager
def aws_errors(operation: str, error_class: type[ApiError] = ApiError) -> Iterator[None]:
    """Translate botocore failures raised inside the block into ``error_class``."""
    try:
        yield
    except (NoCredentialsError, PartialCredentialsError) as e:
        raise CredentialsError(f"{operation} failed - {e}") from e
    except (ClientError, BotoCoreError) as e:
        raise error_class(operation, describe_aws_error(e)) from e
