"""Platform default table and attribute resolver.

Storage and snapshot backends differ per deployment platform. Resolution of
a storage attribute follows a three-level precedence policy:

    explicit per-call value  >  GlobalConfig override  >  platform default

Key Concepts:
    PlatformProfile: Frozen (storage class, snapshot class) pair.
    PLATFORMS: Registry mapping platform identifier → PlatformProfile.
    Attribute: The two resolvable attributes.
    resolve_attribute: The precedence policy. Never returns an empty value.

Architecture Decisions:
    - Frozen dataclasses (not Pydantic): profiles are compile-time constants.
    - Case-sensitive platform identifiers: they come from a CRD enum.
    - Unknown platforms are an error, never a silent fallback to GCP.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dbspine.core.errors import (
    ConfigResolutionError,
    UnknownPlatformError,
    UnsupportedAttributeError,
)
from dbspine.manifests.models import GlobalConfig


class Platform(str, Enum):
    GCP = "GCP"
    BARE_METAL = "BareMetal"
    MINIKUBE = "Minikube"
    KIND = "Kind"


DEFAULT_PLATFORM = Platform.GCP

# Platforms whose hostpath CSI driver mounts volumes writable by root only.
HOSTPATH_PLATFORMS: frozenset[str] = frozenset({Platform.MINIKUBE.value, Platform.KIND.value})


@dataclass(frozen=True)
class PlatformProfile:
    """Default storage backends of a platform."""

    storage_class: str
    volume_snapshot_class: str


PLATFORMS: dict[str, PlatformProfile] = {
    Platform.GCP.value: PlatformProfile(
        storage_class="csi-gce-pd",
        volume_snapshot_class="csi-gce-pd-snapshot-class",
    ),
    Platform.BARE_METAL.value: PlatformProfile(
        storage_class="csi-trident",
        volume_snapshot_class="csi-trident-snapshot-class",
    ),
    Platform.MINIKUBE.value: PlatformProfile(
        storage_class="csi-hostpath-sc",
        volume_snapshot_class="csi-hostpath-snapclass",
    ),
    Platform.KIND.value: PlatformProfile(
        storage_class="csi-hostpath-sc",
        volume_snapshot_class="csi-hostpath-snapclass",
    ),
}


class Attribute(str, Enum):
    STORAGE_CLASS = "StorageClass"
    VOLUME_SNAPSHOT_CLASS = "VolumeSnapshotClass"


_ATTRIBUTE_ALIASES: dict[str, Attribute] = {
    "StorageClass": Attribute.STORAGE_CLASS,
    "storage-class": Attribute.STORAGE_CLASS,
    "VolumeSnapshotClass": Attribute.VOLUME_SNAPSHOT_CLASS,
    "snapshot-class": Attribute.VOLUME_SNAPSHOT_CLASS,
}


def get_platform(name: str) -> PlatformProfile:
    """Look up a platform profile.

    Raises
    ------
    UnknownPlatformError
        If the platform identifier is not recognized.
    """
    if name not in PLATFORMS:
        raise UnknownPlatformError(name).with_context(available=sorted(PLATFORMS))
    return PLATFORMS[name]


def effective_platform(config: GlobalConfig | None) -> str:
    """The configured platform, or the default platform."""
    if config is not None and config.platform:
        return config.platform
    return DEFAULT_PLATFORM.value


def is_hostpath_platform(config: GlobalConfig | None) -> bool:
    return config is not None and config.platform in HOSTPATH_PLATFORMS


def image_pull_policy(config: GlobalConfig | None) -> str:
    """Kind clusters can only use locally loaded images."""
    if config is not None and config.platform == Platform.KIND.value:
        return "IfNotPresent"
    return "Always"


def _to_attribute(name: str | Attribute) -> Attribute:
    if isinstance(name, Attribute):
        return name
    try:
        return _ATTRIBUTE_ALIASES[name]
    except KeyError:
        raise UnsupportedAttributeError(name, [a.value for a in Attribute]) from None


def resolve_attribute(
    name: str | Attribute,
    explicit: str | None,
    config: GlobalConfig | None,
) -> str:
    """Resolve a storage attribute.

    An explicit value is returned as is. Otherwise a non-empty GlobalConfig
    override wins over the platform default.

    Raises
    ------
    UnsupportedAttributeError
        ``name`` is not a storage or snapshot class attribute.
    UnknownPlatformError
        The effective platform has no default table entry.
    ConfigResolutionError
        No layer produced a non-empty value.
    """
    if explicit:
        return explicit

    attribute = _to_attribute(name)
    platform = effective_platform(config)
    profile = get_platform(platform)

    if attribute is Attribute.STORAGE_CLASS:
        value = profile.storage_class
        if config is not None and config.storage_class:
            value = config.storage_class
    else:
        value = profile.volume_snapshot_class
        if config is not None and config.volume_snapshot_class:
            value = config.volume_snapshot_class

    if not value:
        raise ConfigResolutionError(
            f"no value for attribute {attribute.value!r} on platform {platform!r}"
        )
    return value
