"""Environment ConfigMap for the database engine container."""

from __future__ import annotations

import posixpath

from dbspine.manifests.constants import (
    CM_NAME,
    HEALTHCHECK_DB_SCRIPT,
    INSTALL_DIR,
    SCRIPTS_DIR,
)
from dbspine.manifests.models import Instance
from dbspine.manifests.ownership import OwnerScheme, set_controller_reference
from dbspine.manifests.resources import ConfigMap, ObjectMeta

# 18c ships as Express Edition with its own directory layout.
XE_VERSION = "18c"


def oracle_base(version: str) -> str:
    if version == XE_VERSION:
        return "/opt/oracle"
    return "/u01/app/oracle"


def oracle_inventory(version: str) -> str:
    if version == XE_VERSION:
        return "/opt/oracle/oraInventory"
    return "/u01/app/oraInventory"


def oracle_home(version: str) -> str:
    if version == XE_VERSION:
        return posixpath.join(oracle_base(version), "product", version, "dbhomeXE")
    return posixpath.join(oracle_base(version), "product", version, "db")


def new_config_map(
    instance: Instance,
    name: str | None = None,
    scheme: OwnerScheme | None = None,
) -> ConfigMap:
    """Engine environment derived from the instance version."""
    home = oracle_home(instance.version)
    cm = ConfigMap(
        metadata=ObjectMeta(name=name or CM_NAME % instance.name, namespace=instance.namespace),
        data={
            "SCRIPTS_DIR": SCRIPTS_DIR,
            "INSTALL_DIR": INSTALL_DIR,
            "HEALTHCHECK_DB_SCRIPT": HEALTHCHECK_DB_SCRIPT,
            "ORACLE_BASE": oracle_base(instance.version),
            "ORACLE_INV": oracle_inventory(instance.version),
            "ORACLE_HOME": home,
            "LD_LIBRARY_PATH": f"export LD_LIBRARY_PATH={home}/lib:/usr/lib\n",
        },
    )
    set_controller_reference(instance, cm, scheme)
    return cm
