"""Shared base for the ECS feature services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mypy_boto3_ecs.client import ECSClient


class BaseAWSService:
    """Holds the ECS client every feature service talks through."""

    def __init__(self, ecs_client: ECSClient) -> None:
        self.ecs_client = ecs_client
