"""
Shared pytest fixtures for dbspine tests.

This module provides:
- Sample Instance / Backup entities with owner uids set
- GlobalConfig variants per platform
- BuildParameters with a fixed ImageSet

Usage:
    def test_something(params):
        pvcs = new_pvcs(params)
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure dbspine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dbspine.manifests.models import (  # noqa: E402
    Backup,
    BuildParameters,
    GlobalConfig,
    ImageSet,
    Instance,
)

INSTANCE_UID = "6b1c1a3e-0000-4000-8000-000000000001"
BACKUP_UID = "6b1c1a3e-0000-4000-8000-000000000002"


@pytest.fixture
def images() -> ImageSet:
    return ImageSet(
        service="registry.local/oracle-db:19.3",
        dbinit="registry.local/dbinit:v1",
        logging_sidecar="registry.local/loggingsidecar:v1",
        config="registry.local/configagent:v1",
        monitoring="registry.local/monitoring:v1",
    )


@pytest.fixture
def instance() -> Instance:
    """Instance "orcl1" in namespace "db" with no overrides."""
    return Instance(name="orcl1", namespace="db", uid=INSTANCE_UID, cdb_name="ORCL")


@pytest.fixture
def backup() -> Backup:
    return Backup(name="bkp1", namespace="db", uid=BACKUP_UID, instance="orcl1")


@pytest.fixture
def kind_config() -> GlobalConfig:
    return GlobalConfig(platform="Kind")


@pytest.fixture
def params(instance, images) -> BuildParameters:
    """BuildParameters with no GlobalConfig (GCP defaults)."""
    return BuildParameters(instance=instance, images=images)


@pytest.fixture
def kind_params(instance, images, kind_config) -> BuildParameters:
    return BuildParameters(instance=instance, images=images, config=kind_config)


@pytest.fixture
def instance_yaml(tmp_path) -> Path:
    """Kubernetes-style Instance document on disk."""
    path = tmp_path / "orcl1.yaml"
    path.write_text(
        f"""\
apiVersion: oracle.db.anthosapis.com/v1alpha1
kind: Instance
metadata:
  name: orcl1
  namespace: db
  uid: {INSTANCE_UID}
spec:
  cdbName: ORCL
  version: "19.3"
  services:
    Monitoring: true
  disks:
    - name: DataDisk
      size: 200Gi
    - name: LogDisk
""",
        encoding="utf-8",
    )
    return path
