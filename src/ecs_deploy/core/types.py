"""Type definitions for ecs-deploy."""

from __future__ import annotations

from typing import TypedDict


class DeploymentConfiguration(TypedDict, total=False):
    minimumHealthyPercent: int
    maximumPercent: int


class TaskDefinitionTag(TypedDict):
    key: str
    value: str


class TaskStatus(TypedDict):
    task_arn: str
    last_status: str
    exit_code: int | None


class DeploymentResult(TypedDict):
    task_definition_arn: str | None
    previous_task_definition_arn: str | None
    task_arn: str | None
    deregistered: list[str]
    state: str
