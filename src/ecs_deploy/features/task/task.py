"""Task and task definition reads for ECS."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...core.base import BaseAWSService
from ...core.errors import aws_errors
from ...core.types import TaskStatus
from ...core.utils import batch_items, paginate_aws_list

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient
    from mypy_boto3_ecs.type_defs import TaskTypeDef

    from ...core.types import TaskDefinitionTag

DESCRIBE_TASKS_BATCH_SIZE = 100


class TaskService(BaseAWSService):
    """Service for ECS task operations."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def get_task_definition(
        self, task_definition: str, include_tags: bool = False
    ) -> tuple[dict[str, Any], list[TaskDefinitionTag]]:
        """Describe a task definition by ARN, ``family:revision`` or family (latest ACTIVE)."""
        kwargs: dict[str, Any] = {"taskDefinition": task_definition}
        if include_tags:
            kwargs["include"] = ["TAGS"]

        with aws_errors("DescribeTaskDefinition"):
            response = self.ecs_client.describe_task_definition(**kwargs)

        tags: list[TaskDefinitionTag] = list(response.get("tags", [])) if include_tags else []
        return dict(response["taskDefinition"]), tags

    def list_running_tasks(self, cluster_name: str, service_name: str) -> list[str]:
        with aws_errors("ListTasks"):
            return paginate_aws_list(
                self.ecs_client,
                "list_tasks",
                "taskArns",
                cluster=cluster_name,
                serviceName=service_name,
                desiredStatus="RUNNING",
            )

    def describe_tasks(self, cluster_name: str, task_arns: list[str]) -> list[TaskTypeDef]:
        tasks: list[TaskTypeDef] = []
        for batch in batch_items(task_arns, DESCRIBE_TASKS_BATCH_SIZE):
            with aws_errors("DescribeTasks"):
                response = self.ecs_client.describe_tasks(cluster=cluster_name, tasks=batch)
            tasks.extend(response.get("tasks", []))
        return tasks

    def get_task_status(self, cluster_name: str, task_arn: str) -> TaskStatus:
        """Current status and first container exit code of a single task."""
        tasks = self.describe_tasks(cluster_name, [task_arn])
        if not tasks:
            return {"task_arn": task_arn, "last_status": "UNKNOWN", "exit_code": None}
        return _create_task_status(tasks[0])


def _create_task_status(task: TaskTypeDef) -> TaskStatus:
    containers = task.get("containers", [])
    exit_code = containers[0].get("exitCode") if containers else None
    return {
        "task_arn": task["taskArn"],
        "last_status": task.get("lastStatus", "UNKNOWN"),
        "exit_code": exit_code,
    }
