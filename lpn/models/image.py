"""Liferay image variants - single source of truth.

Every application variant lpn can run is registered in ``VARIANTS``. An
``Image`` is the per-invocation value pairing a variant with an optional tag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from .errors import UnsupportedVariantError

DOCKER_REGISTRY = "docker.io"

# Ports inside every Liferay container
HTTP_PORT = 8080
GOGO_SHELL_PORT = 11311
DEBUG_PORT = 9000


class ImageType(str, Enum):
    """Closed set of application variants."""

    CE = "ce"
    COMMERCE = "commerce"
    DXP = "dxp"
    NIGHTLY = "nightly"
    RELEASE = "release"


@dataclass(frozen=True)
class VariantConfig:
    """Static configuration for an application variant."""

    type: ImageType
    name: str  # Human readable name
    repository: str  # Repository on Docker Hub
    default_tag: str
    deploy_folder: str  # Hot deploy folder inside the container
    debug_env_var: str  # Variable that turns JPDA on
    user: str = "liferay"  # Owner of deployed files


VARIANTS: Dict[ImageType, VariantConfig] = {
    ImageType.CE: VariantConfig(
        type=ImageType.CE,
        name="Liferay Portal CE",
        repository="liferay/portal",
        default_tag="7.0.6-ga7",
        deploy_folder="/opt/liferay/deploy",
        debug_env_var="LIFERAY_JPDA_ENABLED",
    ),
    ImageType.COMMERCE: VariantConfig(
        type=ImageType.COMMERCE,
        name="Liferay Commerce",
        repository="liferay/commerce",
        default_tag="1.1.1",
        deploy_folder="/opt/liferay/deploy",
        debug_env_var="LIFERAY_JPDA_ENABLED",
    ),
    ImageType.DXP: VariantConfig(
        type=ImageType.DXP,
        name="Liferay DXP",
        repository="liferay/dxp",
        default_tag="7.0.10.8",
        deploy_folder="/opt/liferay/deploy",
        debug_env_var="LIFERAY_JPDA_ENABLED",
    ),
    ImageType.NIGHTLY: VariantConfig(
        type=ImageType.NIGHTLY,
        name="Liferay Portal Nightly Build",
        repository="mdelapenya/portal-snapshot",
        default_tag="master",
        deploy_folder="/liferay/deploy",
        debug_env_var="LIFERAY_JPDA_ENABLED",
    ),
    ImageType.RELEASE: VariantConfig(
        type=ImageType.RELEASE,
        name="Liferay Portal Release",
        repository="mdelapenya/liferay-portal",
        default_tag="latest",
        deploy_folder="/liferay/deploy",
        debug_env_var="DEBUG_MODE",
    ),
}


@dataclass(frozen=True)
class Image:
    """One deployable application variant, optionally pinned to a tag."""

    type: ImageType
    tag_override: str = ""

    @property
    def config(self) -> VariantConfig:
        return VARIANTS[self.type]

    @property
    def lpn_type(self) -> str:
        return self.type.value

    @property
    def container_name(self) -> str:
        return f"lpn-{self.type.value}"

    @property
    def repository(self) -> str:
        return self.config.repository

    @property
    def tag(self) -> str:
        return self.tag_override or self.config.default_tag

    @property
    def fully_qualified_name(self) -> str:
        return f"{DOCKER_REGISTRY}/{self.repository}:{self.tag}"

    @property
    def docker_hub_tags_path(self) -> str:
        return self.repository

    @property
    def deploy_folder(self) -> str:
        return self.config.deploy_folder

    @property
    def user(self) -> str:
        return self.config.user

    @property
    def debug_env_var(self) -> str:
        return self.config.debug_env_var


def get_supported_variants() -> List[str]:
    """Get the names of all supported application variants."""
    return [t.value for t in ImageType]


def get_image(variant: str, tag: str = "") -> Image:
    """Build an Image from a variant name.

    Raises:
        UnsupportedVariantError: the name is not a registered variant
    """
    try:
        image_type = ImageType(variant.lower().strip())
    except ValueError:
        raise UnsupportedVariantError(variant, get_supported_variants()) from None
    return Image(type=image_type, tag_override=tag or "")
