"""AWS ECS service layer - handles all AWS API interactions."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .features.service.actions import ServiceActions
from .features.service.deployment import DeploymentController, DeploymentState
from .features.service.service import ServiceService
from .features.task.runner import TaskRunner
from .features.task.task import TaskService
from .features.task_definition.pruner import RevisionPruner
from .features.task_definition.registrar import Registrar

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

    from .core.context import DeploymentAttempt
    from .core.types import DeploymentConfiguration, TaskStatus, TaskDefinitionTag
    from .features.task_definition.builder import TaskDefinitionDraft


class ECSService:
    """Service for interacting with AWS ECS."""

    def __init__(self, ecs_client: ECSClient, sleep: Callable[[float], None] = time.sleep) -> None:
        self.ecs_client = ecs_client
        # Initialize feature services
        self._service = ServiceService(ecs_client)
        self._service_actions = ServiceActions(ecs_client)
        self._task = TaskService(ecs_client)
        self._registrar = Registrar(ecs_client)
        self._pruner = RevisionPruner(ecs_client)
        self._runner = TaskRunner(ecs_client, self._task, sleep)
        self.deployments = DeploymentController(self._service, self._service_actions, self._task, sleep)

    def get_service_task_definition_arn(self, cluster_name: str, service_name: str) -> str:
        return self._service.get_desired_task_definition_arn(cluster_name, service_name)

    def get_task_definition(
        self, task_definition: str, include_tags: bool = False
    ) -> tuple[dict[str, Any], list[TaskDefinitionTag]]:
        return self._task.get_task_definition(task_definition, include_tags)

    def register_task_definition(self, draft: TaskDefinitionDraft) -> str:
        return self._registrar.register(draft)

    def deploy(
        self,
        attempt: DeploymentAttempt,
        desired_count: int | None = None,
        deployment_configuration: DeploymentConfiguration | None = None,
    ) -> DeploymentState:
        return self.deployments.deploy(attempt, desired_count, deployment_configuration)

    def force_new_deployment(self, attempt: DeploymentAttempt) -> DeploymentState:
        return self.deployments.force_new_deployment(attempt)

    def prune_revisions(self, family: str, retain: int, keep: str | None = None) -> list[str]:
        return self._pruner.prune(family, retain, keep)

    def run_task(
        self,
        cluster_name: str,
        task_definition_arn: str,
        launch_type: str | None = None,
        platform_version: str | None = None,
        network_configuration: dict[str, Any] | None = None,
    ) -> str:
        return self._runner.run(cluster_name, task_definition_arn, launch_type, platform_version, network_configuration)

    def wait_for_task_success(self, cluster_name: str, task_arn: str, timeout: int) -> TaskStatus:
        return self._runner.wait_for_success(cluster_name, task_arn, timeout)
