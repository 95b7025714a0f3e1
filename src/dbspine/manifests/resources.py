"""Generated Kubernetes resource models.

Each builder returns one of the top-level models below (``Service``,
``ConfigMap``, ``PersistentVolumeClaim``, ``StatefulSet``, ``Deployment``,
``VolumeSnapshot``). Fields are snake_case in Python and serialise to the
camelCase Kubernetes wire names through ``to_manifest()``; unset optional
fields are omitted rather than emitted as ``null``.

Every top-level resource, and every owner entity, satisfies the
``HasMetadata`` protocol, which is all the ownership linker needs.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class K8sModel(BaseModel):
    """Base for all manifest fragments."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=True,
    )

    def to_manifest(self) -> dict[str, Any]:
        """Wire-format dict (camelCase keys, unset fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


class OwnerReference(K8sModel):
    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool | None = None
    block_owner_deletion: bool | None = None


class ObjectMeta(K8sModel):
    name: str | None = None
    namespace: str | None = None
    uid: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None
    owner_references: list[OwnerReference] | None = None


@runtime_checkable
class HasMetadata(Protocol):
    """Anything with a kind, an API version and object metadata."""

    api_version: str
    kind: str

    @property
    def metadata(self) -> ObjectMeta: ...


class LabelSelector(K8sModel):
    match_labels: dict[str, str] | None = None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ServicePort(K8sModel):
    name: str
    protocol: Literal["TCP", "UDP", "SCTP"] = "TCP"
    port: int
    target_port: int | str | None = None


class ServiceSpec(K8sModel):
    selector: dict[str, str] = Field(default_factory=dict)
    ports: list[ServicePort] = Field(default_factory=list)
    type: Literal["ClusterIP", "NodePort", "LoadBalancer"] = "ClusterIP"
    load_balancer_source_ranges: list[str] | None = None


class LoadBalancerIngress(K8sModel):
    ip: str | None = None
    hostname: str | None = None


class LoadBalancerStatus(K8sModel):
    ingress: list[LoadBalancerIngress] = Field(default_factory=list)


class ServiceStatus(K8sModel):
    load_balancer: LoadBalancerStatus = Field(default_factory=LoadBalancerStatus)


class Service(K8sModel):
    api_version: str = "v1"
    kind: str = "Service"
    metadata: ObjectMeta
    spec: ServiceSpec
    status: ServiceStatus | None = None


# ---------------------------------------------------------------------------
# ConfigMap
# ---------------------------------------------------------------------------


class ConfigMap(K8sModel):
    api_version: str = "v1"
    kind: str = "ConfigMap"
    metadata: ObjectMeta
    data: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# PersistentVolumeClaim
# ---------------------------------------------------------------------------


class TypedLocalObjectReference(K8sModel):
    api_group: str | None = None
    kind: str
    name: str


class ResourceRequirements(K8sModel):
    requests: dict[str, str] | None = None
    limits: dict[str, str] | None = None


class PersistentVolumeClaimSpec(K8sModel):
    access_modes: list[str] = Field(default_factory=lambda: ["ReadWriteOnce"])
    resources: ResourceRequirements
    storage_class_name: str | None = None
    data_source: TypedLocalObjectReference | None = None


class PersistentVolumeClaim(K8sModel):
    api_version: str = "v1"
    kind: str = "PersistentVolumeClaim"
    metadata: ObjectMeta
    spec: PersistentVolumeClaimSpec


# ---------------------------------------------------------------------------
# Pods
# ---------------------------------------------------------------------------


class ContainerPort(K8sModel):
    name: str
    protocol: Literal["TCP", "UDP", "SCTP"] = "TCP"
    container_port: int


class VolumeMount(K8sModel):
    name: str
    mount_path: str


class SecurityContext(K8sModel):
    run_as_user: int | None = None
    run_as_group: int | None = None
    run_as_non_root: bool | None = None
    allow_privilege_escalation: bool | None = None


class PodSecurityContext(K8sModel):
    run_as_user: int | None = None
    run_as_group: int | None = None
    fs_group: int | None = None
    run_as_non_root: bool | None = None


class ConfigMapEnvSource(K8sModel):
    name: str


class EnvFromSource(K8sModel):
    config_map_ref: ConfigMapEnvSource | None = None


class Container(K8sModel):
    name: str
    image: str
    command: list[str] | None = None
    args: list[str] | None = None
    ports: list[ContainerPort] | None = None
    resources: ResourceRequirements | None = None
    env_from: list[EnvFromSource] | None = None
    volume_mounts: list[VolumeMount] | None = None
    security_context: SecurityContext | None = None
    image_pull_policy: Literal["Always", "IfNotPresent", "Never"] | None = None


class EmptyDirVolumeSource(K8sModel):
    pass


class Volume(K8sModel):
    name: str
    empty_dir: EmptyDirVolumeSource | None = None


class PodAffinityTerm(K8sModel):
    label_selector: LabelSelector
    namespaces: list[str] | None = None
    topology_key: str


class PodAffinity(K8sModel):
    required_during_scheduling_ignored_during_execution: list[PodAffinityTerm]


class PodAntiAffinity(K8sModel):
    required_during_scheduling_ignored_during_execution: list[PodAffinityTerm]


class Affinity(K8sModel):
    pod_affinity: PodAffinity | None = None
    pod_anti_affinity: PodAntiAffinity | None = None


class PodSpec(K8sModel):
    security_context: PodSecurityContext = Field(default_factory=PodSecurityContext)
    init_containers: list[Container] | None = None
    containers: list[Container]
    share_process_namespace: bool | None = None
    volumes: list[Volume] | None = None
    affinity: Affinity | None = None


class PodTemplateSpec(K8sModel):
    metadata: ObjectMeta
    spec: PodSpec


# ---------------------------------------------------------------------------
# Workloads
# ---------------------------------------------------------------------------


class StatefulSetSpec(K8sModel):
    replicas: int = 1
    selector: LabelSelector
    template: PodTemplateSpec
    volume_claim_templates: list[PersistentVolumeClaim] = Field(default_factory=list)


class StatefulSet(K8sModel):
    api_version: str = "apps/v1"
    kind: str = "StatefulSet"
    metadata: ObjectMeta
    spec: StatefulSetSpec


class DeploymentSpec(K8sModel):
    replicas: int = 1
    selector: LabelSelector
    template: PodTemplateSpec


class Deployment(K8sModel):
    api_version: str = "apps/v1"
    kind: str = "Deployment"
    metadata: ObjectMeta
    spec: DeploymentSpec


# ---------------------------------------------------------------------------
# VolumeSnapshot
# ---------------------------------------------------------------------------


class VolumeSnapshotSource(K8sModel):
    persistent_volume_claim_name: str


class VolumeSnapshotSpec(K8sModel):
    source: VolumeSnapshotSource
    volume_snapshot_class_name: str


class VolumeSnapshot(K8sModel):
    api_version: str = "snapshot.storage.k8s.io/v1"
    kind: str = "VolumeSnapshot"
    metadata: ObjectMeta
    spec: VolumeSnapshotSpec


Resource = Service | ConfigMap | PersistentVolumeClaim | StatefulSet | Deployment | VolumeSnapshot
