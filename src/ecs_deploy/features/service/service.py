"""Service operations for ECS."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...core.base import BaseAWSService
from ...core.errors import ApiError, aws_errors

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import ServiceTypeDef


class ServiceService(BaseAWSService):
    """Service for reading ECS service state."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def describe_service(self, cluster_name: str, service_name: str) -> ServiceTypeDef:
        with aws_errors("DescribeServices"):
            response = self.ecs_client.describe_services(cluster=cluster_name, services=[service_name])
        services = response.get("services", [])
        if not services:
            reasons = ", ".join(failure.get("reason", "UNKNOWN") for failure in response.get("failures", []))
            raise ApiError("DescribeServices", f"service '{service_name}' not found in '{cluster_name}' ({reasons})")
        return services[0]

    def get_desired_task_definition_arn(self, cluster_name: str, service_name: str) -> str:
        return self.describe_service(cluster_name, service_name)["taskDefinition"]

    def get_desired_count(self, cluster_name: str, service_name: str) -> int:
        return self.describe_service(cluster_name, service_name).get("desiredCount", 0)

    def count_deployments(self, cluster_name: str, service_name: str) -> int:
        return len(self.describe_service(cluster_name, service_name).get("deployments", []))
