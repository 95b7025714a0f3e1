"""Disk defaults, claim naming and capacity resolution.

Capacity precedence (first match wins, never fails):

    1. instance disk list entry, if its size is non-zero
    2. GlobalConfig disk override, if its size is non-zero
    3. static default for the logical disk name
    4. DEFAULT_DISK_SIZE for names missing from the table (logged)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from dbspine.core.errors import InvalidInputError
from dbspine.core.logging import get_logger
from dbspine.manifests.constants import DEFAULT_DISK_SIZE, PVC_NAME
from dbspine.manifests.models import BuildParameters, is_zero_quantity

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiskDefault:
    """Built-in capacity and mount location of a logical disk."""

    name: str
    size: str
    mount: str


DEFAULT_DISK_SPECS: dict[str, DiskDefault] = {
    "DataDisk": DiskDefault(name="DataDisk", size="100Gi", mount="u02"),
    "LogDisk": DiskDefault(name="LogDisk", size="150Gi", mount="u03"),
    "BackupDisk": DiskDefault(name="BackupDisk", size="100Gi", mount="u04"),
}


def disk_mount(disk_name: str) -> str:
    """Mount location of a logical disk.

    Names missing from the table mount under their lower-cased name, since
    claim names must be lower-case. See ``check_distinct_mounts``.
    """
    spec = DEFAULT_DISK_SPECS.get(disk_name)
    if spec is None:
        return disk_name.lower()
    return spec.mount


def check_distinct_mounts(disk_names: Iterable[str]) -> None:
    """Reject disk lists where two names share a mount (e.g. ``Foo`` and ``foo``).

    Raises
    ------
    InvalidInputError
        Two disks would be backed by the same claim.
    """
    seen: dict[str, str] = {}
    for name in disk_names:
        mount = disk_mount(name)
        if mount in seen:
            raise InvalidInputError(
                f"disks {seen[mount]!r} and {name!r} both map to mount {mount!r}"
            ).with_context(disk=name)
        seen[mount] = name


def pvc_name_and_mount(instance_name: str, disk_name: str) -> tuple[str, str]:
    """Claim name and mount location for a disk of an instance."""
    mount = disk_mount(disk_name)
    return PVC_NAME % (instance_name, mount), mount


def resolve_disk_size(disk_name: str, params: BuildParameters) -> str:
    """Resolve the capacity of a logical disk."""
    mount = disk_mount(disk_name)

    for disk in params.effective_disks:
        if disk.name == disk_name and disk.size and not is_zero_quantity(disk.size):
            logger.info("disk_size_from_instance", disk=disk_name, mount=mount, size=disk.size)
            return disk.size

    if params.config is not None:
        for disk in params.config.disks:
            if disk.name == disk_name and disk.size and not is_zero_quantity(disk.size):
                logger.info(
                    "disk_size_from_global_config", disk=disk_name, mount=mount, size=disk.size
                )
                return disk.size

    spec = DEFAULT_DISK_SPECS.get(disk_name)
    if spec is None:
        logger.warning("unknown_disk_default_size", disk=disk_name, size=DEFAULT_DISK_SIZE)
        return DEFAULT_DISK_SIZE

    logger.info("disk_size_default", disk=disk_name, mount=mount, size=spec.size)
    return spec.size
