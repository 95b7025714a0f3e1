"""dbspine manifests — resource synthesis for a database instance.

Given an ``Instance`` (plus an optional ``GlobalConfig``, images and restore
request) the builders in this package compute every Kubernetes resource the
instance needs. Builders are pure: same inputs, same manifests, no I/O.

Key Concepts:
    Resolvers: ``resolve_attribute`` (storage/snapshot class precedence) and
        ``resolve_disk_size`` (capacity precedence).
    Builders: one function per resource family (Services, ConfigMap, claims,
        pod template + StatefulSet, agent Deployment, snapshots).
    Ownership: every resource names its Instance (or Backup) as controller.
    Engine: ``synthesize`` runs all builders once; ``render_manifests``
        turns the result into multi-document YAML.

Architecture::

    BuildParameters ──► platforms.resolve_attribute ─┐
                   └──► disks.resolve_disk_size ─────┤
                                                     ▼
        network · configmap · storage · workload · agents · snapshots
                                                     │
                                  ownership.set_controller_reference
                                                     ▼
                                  engine.synthesize / render_manifests

Related Modules:
    - :mod:`dbspine.manifests.status` — status-check gRPC collaborator
    - :mod:`dbspine.cli.app` — ``dbspine render``

Example:
    >>> from dbspine.manifests import resolve_attribute
    >>> resolve_attribute("StorageClass", None, None)
    'csi-gce-pd'
"""

from __future__ import annotations

from dbspine.manifests.agents import new_agent_deployment
from dbspine.manifests.configmap import new_config_map
from dbspine.manifests.disks import DEFAULT_DISK_SPECS, pvc_name_and_mount, resolve_disk_size
from dbspine.manifests.engine import (
    InstanceManifests,
    render_manifests,
    synthesize,
    write_manifests,
)
from dbspine.manifests.models import (
    Backup,
    BuildParameters,
    DiskRequest,
    GlobalConfig,
    ImageSet,
    Instance,
    NetworkOptions,
    RestoreRequest,
    ServiceKind,
)
from dbspine.manifests.network import (
    new_agent_service,
    new_dbdaemon_service,
    new_service,
    service_url,
)
from dbspine.manifests.ownership import OwnerScheme, default_scheme, set_controller_reference
from dbspine.manifests.platforms import (
    PLATFORMS,
    Attribute,
    Platform,
    PlatformProfile,
    get_platform,
    resolve_attribute,
)
from dbspine.manifests.snapshots import new_instance_snapshot, new_snapshot
from dbspine.manifests.status import check_instance_status
from dbspine.manifests.storage import new_pvcs
from dbspine.manifests.workload import new_pod_template, new_statefulset

__all__ = [
    # Entities
    "Backup",
    "BuildParameters",
    "DiskRequest",
    "GlobalConfig",
    "ImageSet",
    "Instance",
    "NetworkOptions",
    "RestoreRequest",
    "ServiceKind",
    # Resolvers
    "Attribute",
    "DEFAULT_DISK_SPECS",
    "PLATFORMS",
    "Platform",
    "PlatformProfile",
    "get_platform",
    "pvc_name_and_mount",
    "resolve_attribute",
    "resolve_disk_size",
    # Builders
    "new_agent_deployment",
    "new_agent_service",
    "new_config_map",
    "new_dbdaemon_service",
    "new_instance_snapshot",
    "new_pod_template",
    "new_pvcs",
    "new_service",
    "new_snapshot",
    "new_statefulset",
    "service_url",
    # Ownership
    "OwnerScheme",
    "default_scheme",
    "set_controller_reference",
    # Engine
    "InstanceManifests",
    "check_instance_status",
    "render_manifests",
    "synthesize",
    "write_manifests",
]
