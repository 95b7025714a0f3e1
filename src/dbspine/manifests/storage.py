"""Storage resource builder.

One PersistentVolumeClaim per logical disk, in the order the disks were
given. A claim is either freshly provisioned by the storage backend or, when
a restore request names a backup, seeded from the VolumeSnapshot
``{backup_id}-{mount}`` taken for that disk.
"""

from __future__ import annotations

from dbspine.core.errors import ConfigResolutionError, StorageClassUnresolvedError
from dbspine.core.logging import get_logger
from dbspine.manifests.constants import SNAPSHOT_API_GROUP
from dbspine.manifests.disks import check_distinct_mounts, pvc_name_and_mount, resolve_disk_size
from dbspine.manifests.models import BuildParameters
from dbspine.manifests.platforms import Attribute, resolve_attribute
from dbspine.manifests.resources import (
    ObjectMeta,
    PersistentVolumeClaim,
    PersistentVolumeClaimSpec,
    ResourceRequirements,
    TypedLocalObjectReference,
    VolumeMount,
)

logger = get_logger(__name__)


def restore_snapshot_name(backup_id: str, mount: str) -> str:
    return f"{backup_id}-{mount}"


def new_pvcs(params: BuildParameters) -> list[PersistentVolumeClaim]:
    """Build the claims for every configured disk.

    Raises
    ------
    InvalidInputError
        Two disks map to the same mount.
    StorageClassUnresolvedError
        A disk has no resolvable storage class; nothing is returned.
    """
    check_distinct_mounts(disk.name for disk in params.effective_disks)
    instance = params.instance
    restore_id = params.restore.backup_id if params.restore is not None else ""
    pvcs: list[PersistentVolumeClaim] = []

    for disk in params.effective_disks:
        size = resolve_disk_size(disk.name, params)
        pvc_name, mount = pvc_name_and_mount(instance.name, disk.name)

        try:
            storage_class = resolve_attribute(Attribute.STORAGE_CLASS, disk.storage_class, params.config)
        except ConfigResolutionError as exc:
            raise StorageClassUnresolvedError(disk.name, cause=exc).with_context(
                instance=instance.name, namespace=instance.namespace
            ) from exc
        logger.info("storage_class_resolved", disk=disk.name, storage_class=storage_class)

        data_source = None
        if restore_id:
            logger.info("disk_restore", mount=mount, backup_id=restore_id)
            data_source = TypedLocalObjectReference(
                api_group=SNAPSHOT_API_GROUP,
                kind="VolumeSnapshot",
                name=restore_snapshot_name(restore_id, mount),
            )
        else:
            logger.info("disk_provision", mount=mount)

        pvcs.append(
            PersistentVolumeClaim(
                metadata=ObjectMeta(name=pvc_name, namespace=instance.namespace),
                spec=PersistentVolumeClaimSpec(
                    access_modes=["ReadWriteOnce"],
                    resources=ResourceRequirements(requests={"storage": size}),
                    storage_class_name=storage_class,
                    data_source=data_source,
                ),
            )
        )

    return pvcs


def pvc_mounts(params: BuildParameters) -> list[VolumeMount]:
    """One mount per disk at ``/{mount}``, named after its claim."""
    check_distinct_mounts(disk.name for disk in params.effective_disks)
    mounts = []
    for disk in params.effective_disks:
        pvc_name, mount = pvc_name_and_mount(params.instance.name, disk.name)
        mounts.append(VolumeMount(name=pvc_name, mount_path=f"/{mount}"))
    return mounts
