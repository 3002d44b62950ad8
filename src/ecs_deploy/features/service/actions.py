"""Service actions for ECS (deployments, scaling, rollbacks)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...core.base import BaseAWSService
from ...core.errors import aws_errors

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

    from ...core.types import DeploymentConfiguration


class ServiceActions(BaseAWSService):
    """Service actions for ECS services."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def update_service(
        self,
        cluster_name: str,
        service_name: str,
        task_definition_arn: str,
        desired_count: int | None = None,
        deployment_configuration: DeploymentConfiguration | None = None,
    ) -> None:
        """Point the service at ``task_definition_arn``."""
        kwargs: dict[str, Any] = {
            "cluster": cluster_name,
            "service": service_name,
            "taskDefinition": task_definition_arn,
        }
        if desired_count is not None:
            kwargs["desiredCount"] = desired_count
        if deployment_configuration:
            kwargs["deploymentConfiguration"] = deployment_configuration

        with aws_errors("UpdateService"):
            self.ecs_client.update_service(**kwargs)

    def force_new_deployment(self, cluster_name: str, service_name: str) -> None:
        """Force a new deployment for a service."""
        with aws_errors("UpdateService"):
            self.ecs_client.update_service(cluster=cluster_name, service=service_name, forceNewDeployment=True)
