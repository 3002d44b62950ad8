"""Build a register-ready task definition from an existing revision."""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ...core.context import HEALTHY, RUNNING, HealthPredicate
from ...core.errors import InvalidSourceDocumentError

if TYPE_CHECKING:
    from ...core.types import TaskDefinitionTag
    from ..image.image import ImageRef

FARGATE = "FARGATE"

# Carried over only when the source revision already sets them
OPTIONAL_FIELDS = (
    "networkMode",
    "taskRoleArn",
    "placementConstraints",
    "executionRoleArn",
    "runtimePlatform",
    "ephemeralStorage",
    "proxyConfiguration",
)
FARGATE_FIELDS = ("requiresCompatibilities", "cpu", "memory", "executionRoleArn")


@dataclass(frozen=True)
class TaskDefinitionDraft:
    """Document for register_task_definition plus the tags to register with it."""

    definition: dict[str, Any]
    tags: list[TaskDefinitionTag] = field(default_factory=list)

    @property
    def family(self) -> str:
        return self.definition["family"]


def load_task_definition_document(source: str | Path) -> tuple[dict[str, Any], list[TaskDefinitionTag]]:
    """Read a task definition from a JSON file.

    Accepts either a bare task definition or the ``describe-task-definition``
    response shape (``{"taskDefinition": ..., "tags": [...]}``).
    """
    try:
        document = json.loads(Path(source).read_text())
    except (OSError, ValueError) as e:
        raise InvalidSourceDocumentError(f"Unable to read task definition from {source}: {e}") from e

    if isinstance(document, Mapping) and "taskDefinition" in document:
        definition = document["taskDefinition"]
        tags = list(document.get("tags") or [])
    else:
        definition, tags = document, []

    _validate_source(definition)
    return dict(definition), tags


def build_task_definition(
    source: Mapping[str, Any],
    image_ref: ImageRef,
    tags: list[TaskDefinitionTag] | None = None,
) -> TaskDefinitionDraft:
    """Project ``source`` into a new revision document that uses ``image_ref``.

    Only fields the platform already set on the source are carried over; no
    defaults are invented. ``tags`` is captured separately when copying tags.
    Outside tag-only mode at least one container must already use the image.
    """
    _validate_source(source)
    if not image_ref.tag_only and not _uses_image(source["containerDefinitions"], image_ref):
        raise InvalidSourceDocumentError(
            f"No container in task definition '{source['family']}' uses image {image_ref.image_without_tag}"
        )

    definition: dict[str, Any] = {
        "family": source["family"],
        "volumes": copy.deepcopy(source.get("volumes") or []),
        "containerDefinitions": rewrite_container_images(source["containerDefinitions"], image_ref),
        "placementConstraints": copy.deepcopy(source.get("placementConstraints") or []),
    }

    for name in OPTIONAL_FIELDS:
        if source.get(name) is not None:
            definition[name] = copy.deepcopy(source[name])

    if is_fargate(source):
        for name in FARGATE_FIELDS:
            if name not in definition and source.get(name) is not None:
                definition[name] = copy.deepcopy(source[name])

    return TaskDefinitionDraft(definition=definition, tags=list(tags or []))


def rewrite_container_images(
    container_definitions: list[dict[str, Any]], image_ref: ImageRef
) -> list[dict[str, Any]]:
    """Return copies of ``container_definitions`` with their images pointed at ``image_ref``."""
    rewritten = []
    for container in container_definitions:
        container_copy = copy.deepcopy(dict(container))
        current = container_copy.get("image")
        if current:
            if image_ref.tag_only:
                container_copy["image"] = f"{split_image_tag(current)[0]}:{image_ref.tag}"
            elif split_image_tag(current)[0] == image_ref.image_without_tag:
                container_copy["image"] = image_ref.render()
        rewritten.append(container_copy)
    return rewritten


def split_image_tag(image: str) -> tuple[str, str | None]:
    """Split an image into its tag-less base and its tag or digest.

    A colon before the last ``/`` belongs to a registry port, not a tag.
    """
    reference = None
    if "@" in image:
        image, reference = image.split("@", 1)
    name_start = image.rfind("/") + 1
    colon = image.rfind(":")
    if colon >= name_start:
        return image[:colon], reference or image[colon + 1 :]
    return image, reference


def is_fargate(definition: Mapping[str, Any]) -> bool:
    return FARGATE in (definition.get("requiresCompatibilities") or [])


def select_health_predicate(definition: Mapping[str, Any]) -> HealthPredicate:
    """Wait for HEALTHY when the first container has a health check, otherwise RUNNING."""
    containers = definition.get("containerDefinitions") or []
    if containers and containers[0].get("healthCheck") is not None:
        return HEALTHY
    return RUNNING


def _uses_image(container_definitions: list[dict[str, Any]], image_ref: ImageRef) -> bool:
    return any(
        split_image_tag(container.get("image") or "")[0] == image_ref.image_without_tag
        for container in container_definitions
    )


def _validate_source(source: object) -> None:
    if not isinstance(source, Mapping):
        raise InvalidSourceDocumentError("Task definition must be a JSON object")
    if not source.get("family"):
        raise InvalidSourceDocumentError("Task definition is missing 'family'")
    if not isinstance(source.get("containerDefinitions"), list):
        raise InvalidSourceDocumentError("Task definition is missing 'containerDefinitions'")
