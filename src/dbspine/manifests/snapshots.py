"""Snapshot resource builder.

Two call shapes produce the same VolumeSnapshot: one owned by a Backup
(ad-hoc backups) and one owned by the Instance (instance-scoped snapshots).
The caller resolves the snapshot class beforehand, typically with
``resolve_attribute(Attribute.VOLUME_SNAPSHOT_CLASS, ...)``.
"""

from __future__ import annotations

from dbspine.manifests.models import Backup, Instance
from dbspine.manifests.ownership import OwnerScheme, set_controller_reference
from dbspine.manifests.resources import (
    HasMetadata,
    ObjectMeta,
    VolumeSnapshot,
    VolumeSnapshotSource,
    VolumeSnapshotSpec,
)


def _snapshot(
    owner: HasMetadata,
    pvc_name: str,
    snap_name: str,
    snapshot_class: str,
    scheme: OwnerScheme | None,
) -> VolumeSnapshot:
    snap = VolumeSnapshot(
        metadata=ObjectMeta(
            name=snap_name,
            namespace=owner.metadata.namespace,
            labels={"snap": snap_name},
        ),
        spec=VolumeSnapshotSpec(
            source=VolumeSnapshotSource(persistent_volume_claim_name=pvc_name),
            volume_snapshot_class_name=snapshot_class,
        ),
    )
    set_controller_reference(owner, snap, scheme)
    return snap


def new_snapshot(
    backup: Backup,
    pvc_name: str,
    snap_name: str,
    snapshot_class: str,
    scheme: OwnerScheme | None = None,
) -> VolumeSnapshot:
    """Snapshot of ``pvc_name`` owned by a backup."""
    return _snapshot(backup, pvc_name, snap_name, snapshot_class, scheme)


def new_instance_snapshot(
    instance: Instance,
    pvc_name: str,
    snap_name: str,
    snapshot_class: str,
    scheme: OwnerScheme | None = None,
) -> VolumeSnapshot:
    """Snapshot of ``pvc_name`` owned by the instance."""
    return _snapshot(instance, pvc_name, snap_name, snapshot_class, scheme)
