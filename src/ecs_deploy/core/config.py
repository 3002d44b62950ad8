"""Immutable run configuration assembled from command line options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .errors import ArgumentError
from .types import DeploymentConfiguration

DEFAULT_TIMEOUT = 90


@dataclass(frozen=True)
class DeployConfig:
    """All options for a single ecs-deploy invocation."""

    cluster: str | None = None
    service_name: str | None = None
    task_definition: str | None = None
    task_definition_file: str | None = None
    image: str | None = None
    tag_env_var: str | None = None
    tag_only: str | None = None
    desired_count: int | None = None
    min_healthy_percent: int | None = None
    max_percent: int | None = None
    timeout: int = DEFAULT_TIMEOUT
    enable_rollback: bool = False
    use_latest_task_definition: bool = False
    force_new_deployment: bool = False
    skip_deployments_check: bool = False
    max_definitions: int = 0
    run_task: bool = False
    launch_type: str | None = None
    platform_version: str | None = None
    network_configuration: dict[str, Any] | None = None
    wait_for_success: bool = False
    copy_task_definition_tags: bool = False
    profile: str | None = None
    region: str | None = None
    assume_role: str | None = None
    assume_role_session_name: str = "ecs-deploy"

    @property
    def service_mode(self) -> bool:
        return self.service_name is not None

    @property
    def deployment_configuration(self) -> DeploymentConfiguration | None:
        """Min/max percent settings for update_service, or None when neither was given."""
        configuration: DeploymentConfiguration = {}
        if self.max_percent is not None:
            configuration["maximumPercent"] = self.max_percent
        if self.min_healthy_percent is not None:
            configuration["minimumHealthyPercent"] = self.min_healthy_percent
        return configuration or None

    def validate(self) -> None:
        """Reject missing or mutually exclusive options before touching AWS."""
        if not self.cluster:
            raise ArgumentError("CLUSTER is required. You can pass the value using -c or --cluster")
        if self.service_name and self.task_definition:
            raise ArgumentError("You can only specify one of SERVICE or TASK DEFINITION")
        if not self.service_name and not self.task_definition:
            raise ArgumentError("SERVICE or TASK DEFINITION is required. Use -n or -d")

        if self.force_new_deployment:
            if not self.service_mode:
                raise ArgumentError("--force-new-deployment requires a SERVICE (-n)")
        elif not self.image and not self.tag_only:
            raise ArgumentError("IMAGE is required. You can pass the value using -i or --image, or use -to")

        if self.use_latest_task_definition and not self.service_mode:
            raise ArgumentError("--use-latest-task-def only applies to SERVICE deployments")

        if self.run_task and self.service_mode:
            raise ArgumentError("--run-task can only be used with a TASK DEFINITION (-d)")
        run_task_options = {
            "--wait-for-success": self.wait_for_success,
            "--launch-type": self.launch_type,
            "--platform-version": self.platform_version,
            "--network-configuration": self.network_configuration,
        }
        for option, value in run_task_options.items():
            if value and not self.run_task:
                raise ArgumentError(f"{option} requires --run-task")

        if self.timeout <= 0:
            raise ArgumentError("TIMEOUT must be a positive number of seconds")
        if self.max_definitions < 0:
            raise ArgumentError("MAX_DEFINITIONS must be zero or a positive integer")
        if self.desired_count is not None and self.desired_count < 0:
            raise ArgumentError("DESIRED count cannot be negative")
        for name, percent in (("MIN", self.min_healthy_percent), ("MAX", self.max_percent)):
            if percent is not None and percent < 0:
                raise ArgumentError(f"{name} percent cannot be negative")
