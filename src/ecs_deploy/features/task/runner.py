"""One-off task execution."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ...core.base import BaseAWSService
from ...core.context import HEALTH_POLL_INTERVAL
from ...core.errors import ApiError, TaskExecutionFailedError, TaskRunTimeoutError, aws_errors
from ...core.utils import poll_until, print_success, show_spinner

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

    from ...core.types import TaskStatus
    from .task import TaskService


class TaskRunner(BaseAWSService):
    """Launches a task from a revision and optionally waits for it to exit cleanly."""

    def __init__(
        self,
        ecs_client: ECSClient,
        task_service: TaskService,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(ecs_client)
        self.task_service = task_service
        self._sleep = sleep

    def run(
        self,
        cluster_name: str,
        task_definition_arn: str,
        launch_type: str | None = None,
        platform_version: str | None = None,
        network_configuration: dict[str, Any] | None = None,
    ) -> str:
        """Start one task and return its ARN."""
        kwargs: dict[str, Any] = {"cluster": cluster_name, "taskDefinition": task_definition_arn}
        if launch_type:
            kwargs["launchType"] = launch_type
        if platform_version:
            kwargs["platformVersion"] = platform_version
        if network_configuration:
            kwargs["networkConfiguration"] = network_configuration

        with aws_errors("RunTask"):
            response = self.ecs_client.run_task(**kwargs)

        tasks = response.get("tasks", [])
        failures = response.get("failures", [])
        if not tasks or failures:
            reasons = ", ".join(
                f"{failure.get('arn', task_definition_arn)}: {failure.get('reason', 'UNKNOWN')}" for failure in failures
            )
            raise ApiError("RunTask", f"task could not be started ({reasons or 'no reason given'})")
        return tasks[0]["taskArn"]

    def wait_for_success(
        self,
        cluster_name: str,
        task_arn: str,
        timeout: int,
        poll_interval: int = HEALTH_POLL_INTERVAL,
    ) -> TaskStatus:
        """Wait for the task to stop and require exit code 0 from its first container."""
        statuses: list[TaskStatus] = []

        def stopped() -> bool:
            statuses.append(self.task_service.get_task_status(cluster_name, task_arn))
            return statuses[-1]["last_status"] == "STOPPED"

        with show_spinner(f"Waiting for task {task_arn} to stop..."):
            finished = poll_until(stopped, timeout, poll_interval, self._sleep)

        if not finished:
            raise TaskRunTimeoutError(f"Task did not complete within {timeout} seconds")

        status = statuses[-1]
        if status["exit_code"] != 0:
            raise TaskExecutionFailedError(task_arn, status["exit_code"])

        print_success("Task completed successfully")
        return status
