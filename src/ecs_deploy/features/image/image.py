"""Container image reference parsing and reassembly."""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import environ

from ...core.errors import MissingDomainOrRepoError, MissingImageNameError, UnparseableImageError

DEFAULT_TAG = "latest"

# domain[:port]/repo[/image...][:tag]
_IMAGE_PATTERN = re.compile(
    r"^([a-zA-Z0-9.\-]*):?([0-9]+)?/([a-zA-Z0-9._\-]*)(/[/a-zA-Z0-9._\-]+)?:?([a-zA-Z0-9._\-]+)?$"
)
# Root level images such as "mariadb" or "mariadb:latest"
_ROOT_IMAGE_PATTERN = re.compile(r"^([a-zA-Z0-9\-]+):?([a-zA-Z0-9._\-]+)?$")
_TAG_ONLY_PATTERN = re.compile(r"^:?([a-zA-Z0-9._\-]+)?$")


@dataclass(frozen=True)
class ImageRef:
    """A parsed image reference.

    In tag-only mode every positional component is empty and only ``tag`` is
    meaningful: the tag is applied to whatever images the task definition
    already uses.
    """

    image: str
    tag: str
    domain: str = ""
    port: str = ""
    repository: str = ""
    tag_only: bool = False

    @property
    def image_without_tag(self) -> str:
        if self.tag_only:
            return ""
        prefix = self.domain
        if self.port:
            prefix = f"{prefix}:{self.port}"
        if self.repository:
            prefix = f"{prefix}/{self.repository}"
        return f"{prefix}/{self.image}" if prefix else self.image

    def render(self) -> str:
        if self.tag_only:
            return self.tag
        return f"{self.image_without_tag}:{self.tag}"

    def __str__(self) -> str:
        return self.render()


def parse_image(raw: str, tag_only: bool = False, tag_env_var: str | None = None) -> ImageRef:
    """Parse ``raw`` into an ImageRef.

    The tag is taken from the raw string when present, otherwise from the
    environment variable named by ``tag_env_var``, otherwise ``latest``.
    """
    if tag_only:
        return _parse_tag_only(raw, tag_env_var)

    if not raw:
        raise MissingImageNameError("Image name is missing the actual image name. See usage for supported formats.")

    match = _IMAGE_PATTERN.match(raw)
    if match:
        domain, port, repository, image, tag = match.groups()
        if not domain:
            raise MissingDomainOrRepoError(
                f"Image name '{raw}' does not contain a domain or repo as expected. See usage for supported formats."
            )
        if not repository:
            raise MissingImageNameError(
                f"Image name '{raw}' is missing the actual image name. See usage for supported formats."
            )
        image = image.lstrip("/") if image else ""
        # A single path segment after the domain is the image itself
        if not image:
            image, repository = repository, ""
        return ImageRef(
            image=image,
            tag=_resolve_tag(tag, tag_env_var),
            domain=domain,
            port=port or "",
            repository=repository,
        )

    root_match = _ROOT_IMAGE_PATTERN.match(raw)
    if root_match:
        image, tag = root_match.groups()
        return ImageRef(image=image, tag=_resolve_tag(tag, tag_env_var))

    raise UnparseableImageError(f"Unable to parse image name: {raw}, check the format and try again")


def _parse_tag_only(raw: str, tag_env_var: str | None) -> ImageRef:
    match = _TAG_ONLY_PATTERN.match(raw or "")
    if not match:
        raise UnparseableImageError(f"Unable to parse tag: {raw}, check the format and try again")
    return ImageRef(image="", tag=_resolve_tag(match.group(1), tag_env_var), tag_only=True)


def _resolve_tag(tag: str | None, tag_env_var: str | None) -> str:
    if tag:
        return tag
    if tag_env_var and environ.get(tag_env_var):
        return environ[tag_env_var]
    return DEFAULT_TAG
