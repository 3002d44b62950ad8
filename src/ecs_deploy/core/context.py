"""Context objects for passing deployment state between components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

HEALTH_POLL_INTERVAL = 10
DRAIN_POLL_INTERVAL = 2


@dataclass(frozen=True)
class HealthPredicate:
    """Condition a task on the new revision must satisfy to count as healthy."""

    field: str
    value: str

    def matches(self, task: Mapping[str, Any]) -> bool:
        return task.get(self.field) == self.value

    def describe(self) -> str:
        return f"{self.field} == {self.value}"


HEALTHY = HealthPredicate(field="healthStatus", value="HEALTHY")
RUNNING = HealthPredicate(field="lastStatus", value="RUNNING")


@dataclass(frozen=True)
class DeploymentAttempt:
    """Everything one service rollout needs; lives only for a single invocation."""

    cluster_name: str
    service_name: str
    target_revision: str
    previous_revision: str | None
    timeout: int
    health_predicate: HealthPredicate = RUNNING
    enable_rollback: bool = False
    skip_deployments_check: bool = False
    poll_interval: int = HEALTH_POLL_INTERVAL
    drain_poll_interval: int = DRAIN_POLL_INTERVAL

    @property
    def service_label(self) -> str:
        return f"{self.service_name} ({self.cluster_name})"
