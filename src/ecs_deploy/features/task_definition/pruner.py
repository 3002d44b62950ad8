"""Deregistration of outdated task definition revisions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from botocore.exceptions import BotoCoreError, ClientError

from ...core.base import BaseAWSService
from ...core.errors import aws_errors, describe_aws_error
from ...core.utils import extract_family, paginate_aws_list, print_info, print_warning

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient


class RevisionPruner(BaseAWSService):
    """Keeps a family's ACTIVE revisions within a retention count."""

    def __init__(self, ecs_client: ECSClient) -> None:
        super().__init__(ecs_client)

    def list_active_revisions(self, family: str) -> list[str]:
        """ACTIVE revisions of exactly ``family``, oldest first."""
        with aws_errors("ListTaskDefinitions"):
            arns = paginate_aws_list(
                self.ecs_client,
                "list_task_definitions",
                "taskDefinitionArns",
                familyPrefix=family,
                status="ACTIVE",
                sort="ASC",
            )
        # familyPrefix also matches longer family names
        return [arn for arn in arns if extract_family(arn) == family]

    def prune(self, family: str, retain: int, keep: str | None = None) -> list[str]:
        """Deregister the oldest revisions beyond ``retain``; returns the deregistered ARNs.

        Failures are reported and skipped, pruning never fails a deployment.
        """
        if retain <= 0:
            return []

        revisions = self.list_active_revisions(family)
        if len(revisions) <= retain:
            return []

        deregistered = []
        for arn in revisions[: len(revisions) - retain]:
            if arn == keep:
                continue
            print_info(f"Deregistering outdated task revision: {arn}")
            try:
                self.ecs_client.deregister_task_definition(taskDefinition=arn)
            except (ClientError, BotoCoreError) as e:
                print_warning(f"Could not deregister {arn}: {describe_aws_error(e)}")
                continue
            deregistered.append(arn)
        return deregistered
