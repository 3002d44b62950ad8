"""Main deployment pipeline for the ecs-deploy CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..features.image.image import ImageRef, parse_image
from ..features.task_definition.builder import (
    build_task_definition,
    load_task_definition_document,
    select_health_predicate,
)
from .context import DeploymentAttempt
from .errors import ApiError
from .utils import extract_family, print_info, print_success, print_warning

if TYPE_CHECKING:
    from ..aws_service import ECSService
    from .config import DeployConfig
    from .types import DeploymentResult, TaskDefinitionTag


def run_deployment(config: DeployConfig, ecs_service: ECSService) -> DeploymentResult:
    """Run one deployment described by ``config``.

    Service mode registers a new revision and rolls the service onto it;
    task-definition mode only registers the revision and optionally runs it
    as a one-off task.
    """
    config.validate()

    if config.force_new_deployment:
        return _force_new_deployment(config, ecs_service)

    image_ref = resolve_image(config)
    print_info(f"Using image name: {image_ref}")

    previous_arn = None
    if config.service_name:
        previous_arn = ecs_service.get_service_task_definition_arn(config.cluster, config.service_name)

    definition, tags = _load_source_definition(config, ecs_service, previous_arn)
    print_info(f"Current task definition: {definition.get('taskDefinitionArn', definition['family'])}")

    draft = build_task_definition(definition, image_ref, tags if config.copy_task_definition_tags else None)
    new_arn = ecs_service.register_task_definition(draft)
    print_info(f"New task definition: {new_arn}")

    result: DeploymentResult = {
        "task_definition_arn": new_arn,
        "previous_task_definition_arn": previous_arn,
        "task_arn": None,
        "deregistered": [],
        "state": "REGISTERED",
    }

    if not config.service_name:
        if config.run_task:
            result["task_arn"] = _run_task(config, ecs_service, new_arn)
        print_success("Task definition updated successfully")
        return result

    attempt = DeploymentAttempt(
        cluster_name=config.cluster,
        service_name=config.service_name,
        target_revision=new_arn,
        previous_revision=previous_arn,
        timeout=config.timeout,
        health_predicate=select_health_predicate(draft.definition),
        enable_rollback=config.enable_rollback,
        skip_deployments_check=config.skip_deployments_check,
    )
    state = ecs_service.deploy(attempt, config.desired_count, config.deployment_configuration)
    result["state"] = state.value
    result["deregistered"] = _prune(config, ecs_service, draft.family, new_arn)
    return result


def resolve_image(config: DeployConfig) -> ImageRef:
    if config.tag_only:
        return parse_image(config.tag_only, tag_only=True, tag_env_var=config.tag_env_var)
    return parse_image(config.image or "", tag_env_var=config.tag_env_var)


def _load_source_definition(
    config: DeployConfig, ecs_service: ECSService, service_arn: str | None
) -> tuple[dict[str, Any], list[TaskDefinitionTag]]:
    """The revision the new one is based on: a local file, the family's latest, or the current one."""
    if config.task_definition_file:
        return load_task_definition_document(config.task_definition_file)

    source = service_arn if config.service_name else config.task_definition
    if config.use_latest_task_definition and service_arn:
        source = extract_family(service_arn)

    return ecs_service.get_task_definition(source, include_tags=config.copy_task_definition_tags)


def _force_new_deployment(config: DeployConfig, ecs_service: ECSService) -> DeploymentResult:
    print_info("Force new deployment")
    current_arn = ecs_service.get_service_task_definition_arn(config.cluster, config.service_name)
    attempt = DeploymentAttempt(
        cluster_name=config.cluster,
        service_name=config.service_name,
        target_revision=current_arn,
        previous_revision=current_arn,
        timeout=config.timeout,
        enable_rollback=config.enable_rollback,
        skip_deployments_check=config.skip_deployments_check,
    )
    state = ecs_service.force_new_deployment(attempt)
    return {
        "task_definition_arn": current_arn,
        "previous_task_definition_arn": current_arn,
        "task_arn": None,
        "deregistered": [],
        "state": state.value,
    }


def _run_task(config: DeployConfig, ecs_service: ECSService, task_definition_arn: str) -> str:
    print_info(f"Run task: {task_definition_arn}")
    task_arn = ecs_service.run_task(
        config.cluster,
        task_definition_arn,
        launch_type=config.launch_type,
        platform_version=config.platform_version,
        network_configuration=config.network_configuration,
    )
    if config.wait_for_success:
        ecs_service.wait_for_task_success(config.cluster, task_arn, config.timeout)
    print_info(f"Task {task_arn} executed")
    return task_arn


def _prune(config: DeployConfig, ecs_service: ECSService, family: str, new_arn: str) -> list[str]:
    if config.max_definitions <= 0:
        return []
    try:
        return ecs_service.prune_revisions(family, config.max_definitions, keep=new_arn)
    except ApiError as e:
        print_warning(f"Skipping cleanup of old task definitions: {e}")
        return []
