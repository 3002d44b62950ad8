"""Service rollout: update, health polling, drain check and rollback."""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, NoReturn

from ...core.errors import ApiError, DeploymentTimeoutError, RollbackFailedError
from ...core.utils import poll_until, print_info, print_success, print_warning, show_spinner

if TYPE_CHECKING:
    from ...core.context import DeploymentAttempt
    from ...core.types import DeploymentConfiguration
    from ..task.task import TaskService
    from .actions import ServiceActions
    from .service import ServiceService


class DeploymentState(Enum):
    UPDATING = "UPDATING"
    POLLING = "POLLING"
    SUCCEEDED = "SUCCEEDED"
    ROLLED_BACK = "ROLLED_BACK"
    FAILED = "FAILED"


class DeploymentController:
    """Drives one service from its current revision to a target revision."""

    def __init__(
        self,
        service_service: ServiceService,
        service_actions: ServiceActions,
        task_service: TaskService,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.service_service = service_service
        self.service_actions = service_actions
        self.task_service = task_service
        self._sleep = sleep
        self.state: DeploymentState | None = None

    def deploy(
        self,
        attempt: DeploymentAttempt,
        desired_count: int | None = None,
        deployment_configuration: DeploymentConfiguration | None = None,
    ) -> DeploymentState:
        """Update the service and wait until the target revision is healthy and alone.

        Raises DeploymentTimeoutError (after rolling back if enabled) when the
        rollout does not settle within the attempt's timeout.
        """
        self.state = DeploymentState.UPDATING
        try:
            self.service_actions.update_service(
                attempt.cluster_name,
                attempt.service_name,
                attempt.target_revision,
                desired_count=desired_count,
                deployment_configuration=deployment_configuration,
            )
            current_desired_count = self.service_service.get_desired_count(attempt.cluster_name, attempt.service_name)
        except ApiError:
            self.state = DeploymentState.FAILED
            raise

        if current_desired_count <= 0:
            print_info("Skipping check for running task definition, as desired-count <= 0")
            self.state = DeploymentState.SUCCEEDED
            return self.state

        self.state = DeploymentState.POLLING
        if not self.wait_for_new_revision(attempt):
            self._fail(attempt, f"New task definition not running within {attempt.timeout} seconds")
        print_success("Service updated successfully, new task definition running.")

        return self._finish(attempt)

    def force_new_deployment(self, attempt: DeploymentAttempt) -> DeploymentState:
        """Redeploy the current revision and wait for the rollout to drain."""
        self.state = DeploymentState.UPDATING
        try:
            self.service_actions.force_new_deployment(attempt.cluster_name, attempt.service_name)
        except ApiError:
            self.state = DeploymentState.FAILED
            raise
        print_info(f"Forced new deployment of {attempt.service_label}")

        self.state = DeploymentState.POLLING
        return self._finish(attempt)

    def wait_for_new_revision(self, attempt: DeploymentAttempt) -> bool:
        """Poll until a task of the target revision satisfies the health predicate."""

        def new_revision_is_healthy() -> bool:
            task_arns = self.task_service.list_running_tasks(attempt.cluster_name, attempt.service_name)
            if not task_arns:
                return False
            tasks = self.task_service.describe_tasks(attempt.cluster_name, task_arns)
            return any(
                task.get("taskDefinitionArn") == attempt.target_revision and attempt.health_predicate.matches(task)
                for task in tasks
            )

        with show_spinner(f"Waiting for a task with {attempt.health_predicate.describe()}..."):
            return poll_until(new_revision_is_healthy, attempt.timeout, attempt.poll_interval, self._sleep)

    def wait_for_single_deployment(self, attempt: DeploymentAttempt) -> bool:
        """Poll until the service reports exactly one deployment, i.e. the old revision drained."""

        def drained() -> bool:
            return self.service_service.count_deployments(attempt.cluster_name, attempt.service_name) == 1

        with show_spinner("Waiting for service deployment to complete..."):
            return poll_until(drained, attempt.timeout, attempt.drain_poll_interval, self._sleep)

    def rollback(self, attempt: DeploymentAttempt) -> None:
        if not attempt.previous_revision:
            raise RollbackFailedError("UpdateService", "no previous task definition recorded for rollback")

        print_warning(f"Rolling back to {attempt.previous_revision}")
        try:
            self.service_actions.update_service(attempt.cluster_name, attempt.service_name, attempt.previous_revision)
        except ApiError as e:
            raise RollbackFailedError(e.operation, f"rollback to {attempt.previous_revision}: {e}") from e
        self.state = DeploymentState.ROLLED_BACK

    def _finish(self, attempt: DeploymentAttempt) -> DeploymentState:
        if attempt.skip_deployments_check:
            print_info("Skipping deployments check")
        elif not self.wait_for_single_deployment(attempt):
            self._fail(attempt, f"Service deployment did not complete within {attempt.timeout} seconds")
        else:
            print_success("Service deployment successful.")

        self.state = DeploymentState.SUCCEEDED
        return self.state

    def _fail(self, attempt: DeploymentAttempt, message: str) -> NoReturn:
        self.state = DeploymentState.FAILED
        if attempt.enable_rollback:
            self.rollback(attempt)
        raise DeploymentTimeoutError(message, rolled_back=self.state is DeploymentState.ROLLED_BACK)
