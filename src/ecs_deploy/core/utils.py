"""Utility functions for ecs-deploy."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Literal, TypeVar

from rich.console import Console

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

console = Console()

T = TypeVar("T")


def extract_name_from_arn(arn: str) -> str:
    """Extract resource name from AWS ARN."""
    return arn.split("/")[-1]


def extract_family(task_definition: str) -> str:
    """Extract the family from a task definition ARN, ``family:revision`` or bare family."""
    return extract_name_from_arn(task_definition).split(":")[0]


def print_error(message: str) -> None:
    console.print(f"❌ {message}", style="red")


def print_success(message: str) -> None:
    console.print(f"✅ {message}", style="green")


def print_warning(message: str) -> None:
    console.print(f"⚠️ {message}", style="yellow")


def print_info(message: str) -> None:
    console.print(message, style="blue")


@contextmanager
def show_spinner(message: str = "Working...") -> Iterator[None]:
    """Context manager that shows a spinner while running operations."""
    with console.status(message, spinner="dots", spinner_style="cyan"):
        yield


def paginate_aws_list(
    client: ECSClient,
    operation_name: Literal["list_task_definitions", "list_tasks"],
    result_key: str,
    **kwargs: str,
) -> list[str]:
    paginator = client.get_paginator(operation_name)  # type: ignore[no-matching-overload]
    page_iterator = paginator.paginate(**kwargs)

    results: list[str] = []
    for page in page_iterator:
        results.extend(page.get(result_key, []))

    return results


def batch_items(items: Sequence[T], batch_size: int) -> Iterator[list[T]]:
    """Yield successive chunks of ``items``; ECS caps describe calls at 100 ARNs."""
    for start in range(0, len(items), batch_size):
        yield list(items[start : start + batch_size])


def poll_until(
    check: Callable[[], bool],
    timeout: int,
    interval: int,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Re-evaluate ``check`` every ``interval`` seconds until it passes or ``timeout`` elapses.

    Elapsed time is counted in whole intervals, so a check is made at
    0, interval, 2*interval, ... while the count stays below ``timeout``.
    """
    elapsed = 0
    while elapsed < timeout:
        if check():
            return True
        sleep(interval)
        elapsed += interval
    return False
