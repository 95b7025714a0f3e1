"""Tests for dbspine.manifests.storage — claims and restore data sources."""

from __future__ import annotations

import pytest

from dbspine.core.errors import (
    ConfigResolutionError,
    InvalidInputError,
    StorageClassUnresolvedError,
)
from dbspine.manifests.models import (
    BuildParameters,
    DiskRequest,
    GlobalConfig,
    Instance,
    RestoreRequest,
)
from dbspine.manifests.storage import new_pvcs, pvc_mounts, restore_snapshot_name


class TestNewPvcs:
    def test_orcl1_defaults(self, params):
        pvcs = new_pvcs(params)
        assert [p.metadata.name for p in pvcs] == ["orcl1-pvc-u02", "orcl1-pvc-u03"]
        data = pvcs[0]
        assert data.metadata.namespace == "db"
        assert data.spec.access_modes == ["ReadWriteOnce"]
        assert data.spec.resources.requests == {"storage": "100Gi"}
        assert data.spec.storage_class_name == "csi-gce-pd"
        assert data.spec.data_source is None
        assert pvcs[1].spec.resources.requests == {"storage": "150Gi"}

    def test_input_order_preserved(self, images):
        inst = Instance(
            name="orcl1",
            uid="u",
            disks=[DiskRequest(name="BackupDisk"), DiskRequest(name="DataDisk")],
        )
        pvcs = new_pvcs(BuildParameters(instance=inst, images=images))
        assert [p.metadata.name for p in pvcs] == ["orcl1-pvc-u04", "orcl1-pvc-u02"]

    def test_per_disk_storage_class(self, images):
        inst = Instance(
            name="orcl1",
            uid="u",
            disks=[DiskRequest(name="DataDisk", storage_class="fast"), DiskRequest(name="LogDisk")],
        )
        pvcs = new_pvcs(BuildParameters(instance=inst, images=images, config=GlobalConfig(platform="Kind")))
        assert [p.spec.storage_class_name for p in pvcs] == ["fast", "csi-hostpath-sc"]

    def test_restore_sets_data_source(self, instance, images):
        params = BuildParameters(
            instance=instance, images=images, restore=RestoreRequest(backup_id="bkp-42")
        )
        pvcs = new_pvcs(params)
        sources = [p.spec.data_source for p in pvcs]
        assert [s.name for s in sources] == ["bkp-42-u02", "bkp-42-u03"]
        assert all(s.kind == "VolumeSnapshot" for s in sources)
        assert all(s.api_group == "snapshot.storage.k8s.io" for s in sources)

    def test_empty_backup_id_means_no_restore(self, instance, images):
        params = BuildParameters(instance=instance, images=images, restore=RestoreRequest(backup_id=""))
        assert all(p.spec.data_source is None for p in new_pvcs(params))

    def test_restore_manifest(self, instance, images):
        params = BuildParameters(instance=instance, images=images, restore=RestoreRequest(backup_id="b"))
        manifest = new_pvcs(params)[0].to_manifest()
        assert manifest["spec"]["dataSource"] == {
            "apiGroup": "snapshot.storage.k8s.io",
            "kind": "VolumeSnapshot",
            "name": "b-u02",
        }
        assert manifest["spec"]["storageClassName"] == "csi-gce-pd"
        assert manifest["spec"]["accessModes"] == ["ReadWriteOnce"]

    def test_unknown_platform_aborts(self, instance, images):
        params = BuildParameters(instance=instance, images=images, config=GlobalConfig(platform="Mars"))
        with pytest.raises(StorageClassUnresolvedError) as exc_info:
            new_pvcs(params)
        error = exc_info.value
        assert error.disk == "DataDisk"
        assert isinstance(error.cause, ConfigResolutionError)
        assert error.__cause__ is error.cause
        assert error.context.instance == "orcl1"

    def test_restore_snapshot_name(self):
        assert restore_snapshot_name("bkp", "u03") == "bkp-u03"


    def test_case_insensitive_duplicate_disks_rejected(self, images):
        inst = Instance(
            name="orcl1",
            uid="u",
            disks=[DiskRequest(name="Foo"), DiskRequest(name="foo")],
        )
        with pytest.raises(InvalidInputError) as exc_info:
            new_pvcs(BuildParameters(instance=inst, images=images))
        assert "'Foo' and 'foo'" in exc_info.value.message
        assert exc_info.value.category.value == "VALIDATION"


class TestPvcMounts:
    def test_mounts(self, params):
        mounts = pvc_mounts(params)
        assert [(m.name, m.mount_path) for m in mounts] == [
            ("orcl1-pvc-u02", "/u02"),
            ("orcl1-pvc-u03", "/u03"),
        ]

    def test_duplicate_mounts_rejected(self, images):
        inst = Instance(
            name="orcl1",
            uid="u",
            disks=[DiskRequest(name="ArchiveDisk"), DiskRequest(name="archivedisk")],
        )
        with pytest.raises(InvalidInputError):
            pvc_mounts(BuildParameters(instance=inst, images=images))
