"""Task definition registration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...core.base import BaseAWSService
from ...core.errors import RegistrationError, aws_errors

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient

    from .builder import TaskDefinitionDraft


class Registrar(BaseAWSService):
    """Registers built drafts as new task definition revisions."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def register(self, draft: TaskDefinitionDraft) -> str:
        """Register ``draft`` and return the new revision's ARN."""
        request: dict[str, Any] = dict(draft.definition)
        if draft.tags:
            request["tags"] = draft.tags

        with aws_errors("RegisterTaskDefinition", RegistrationError):
            response = self.ecs_client.register_task_definition(**request)

        return response["taskDefinition"]["taskDefinitionArn"]
