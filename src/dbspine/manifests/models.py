"""Input entities for manifest synthesis.

The reconciler hands the engine an ``Instance`` (and, for ad-hoc snapshots,
a ``Backup``), an optional cluster-wide ``GlobalConfig``, the images to run
and an optional restore request. All of them are frozen Pydantic models:
a build call can never mutate its inputs, so identical inputs always yield
identical manifests.

Key Concepts:
    Instance: The logical database workload. Owner of every generated
        resource except ad-hoc snapshots.
    Backup: Owner of snapshots taken for a backup.
    GlobalConfig: Optional override singleton (platform, storage and
        snapshot classes, per-disk sizes, agent log levels, anti-affinity
        namespaces). ``None`` is a valid state.
    BuildParameters: Transient bundle passed into the builders.
    ServiceKind: Closed set of optional services an instance may enable.

Documents can be loaded with ``from_yaml()``; both flat mappings and
Kubernetes-style ``{metadata, spec}`` documents are accepted, with either
snake_case or camelCase keys.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from dbspine.core.errors import InvalidInputError
from dbspine.core.logging import get_logger
from dbspine.manifests.constants import (
    AGENT_DEPLOYMENT_NAME,
    API_VERSION,
    CM_NAME,
    DEFAULT_SOURCE_CIDR_RANGES,
    STS_NAME,
)
from dbspine.manifests.ownership import OwnerScheme, default_scheme
from dbspine.manifests.resources import ObjectMeta

logger = get_logger(__name__)

# Kubernetes resource quantity, e.g. "100Gi", "4.0Gi", "512M"
_QUANTITY_RE = re.compile(r"^(?P<number>[0-9]+(\.[0-9]*)?|\.[0-9]+)(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|m|k|M|G|T|P|E)?$")


def is_zero_quantity(quantity: str | None) -> bool:
    """True for an unset or numerically zero quantity."""
    if not quantity:
        return True
    match = _QUANTITY_RE.match(quantity)
    if match is None:
        return True
    return float(match.group("number")) == 0


def _check_quantity(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    if not _QUANTITY_RE.match(value):
        raise ValueError(f"invalid resource quantity: {value!r}")
    return value


class _InputModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    @classmethod
    def _flatten(cls, document: dict[str, Any]) -> dict[str, Any]:
        """Merge a ``{metadata, spec}`` document into a flat mapping."""
        if "spec" not in document:
            return document
        flat: dict[str, Any] = dict(document.get("spec") or {})
        metadata = document.get("metadata") or {}
        for key in ("name", "namespace", "uid"):
            if key in metadata:
                flat[key] = metadata[key]
        return flat

    @classmethod
    def from_mapping(cls, document: dict[str, Any]) -> Any:
        """Validate a mapping, raising ``InvalidInputError`` on bad input."""
        try:
            return cls.model_validate(cls._flatten(document))
        except ValidationError as exc:
            raise InvalidInputError(
                f"invalid {cls.__name__} document: {exc.error_count()} error(s)",
                cause=exc,
            ) from exc

    @classmethod
    def from_yaml(cls, source: str | Path) -> Any:
        """Load an entity from a YAML string or file path."""
        text = source.read_text() if isinstance(source, Path) else source
        try:
            document = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise InvalidInputError(f"malformed {cls.__name__} YAML: {exc}", cause=exc) from exc
        if not isinstance(document, dict):
            raise InvalidInputError(f"{cls.__name__} document must be a mapping")
        return cls.from_mapping(document)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


class ServiceKind(str, Enum):
    """Optional services an instance can enable."""

    BACKUP = "Backup"
    MONITORING = "Monitoring"
    LOGGING = "Logging"
    PATCHING = "Patching"
    HA = "HA"

    @classmethod
    def parse(cls, value: str) -> ServiceKind | None:
        """Map a service identifier to a kind; ``None`` if unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return None


def parse_services(values: Iterable[str]) -> list[ServiceKind]:
    """Parse service identifiers, logging and skipping unknown ones."""
    kinds: list[ServiceKind] = []
    for value in values:
        kind = ServiceKind.parse(value)
        if kind is None:
            logger.warning("unsupported_service", service=value)
            continue
        kinds.append(kind)
    return kinds


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


class DiskRequest(_InputModel):
    """A logical disk with optional explicit size and storage class."""

    name: str
    size: str | None = None
    storage_class: str | None = None

    @field_validator("size")
    @classmethod
    def _validate_size(cls, value: str | None) -> str | None:
        return _check_quantity(value)


class NetworkOptions(_InputModel):
    """Options for the primary data Service."""

    load_balancer_type: Literal["Internal", "External"] | None = None


class Instance(_InputModel):
    """The logical database instance; owner of the generated resources."""

    api_version: ClassVar[str] = API_VERSION
    kind: ClassVar[str] = "Instance"

    name: str = Field(min_length=1)
    namespace: str = "default"
    uid: str = ""
    version: str = "19.3"
    cdb_name: str = "GCLOUD"
    db_domain: str = ""
    db_unique_name: str = ""
    services: dict[str, bool] = Field(default_factory=dict)
    network: NetworkOptions | None = None
    source_cidr_ranges: tuple[str, ...] = ()
    database_uid: int | None = None
    database_gid: int | None = None
    disks: tuple[DiskRequest, ...] = ()
    min_memory_for_db_container: str | None = None

    @field_validator("min_memory_for_db_container")
    @classmethod
    def _validate_memory(cls, value: str | None) -> str | None:
        return _check_quantity(value)

    @property
    def metadata(self) -> ObjectMeta:
        return ObjectMeta(name=self.name, namespace=self.namespace, uid=self.uid or None)

    def enabled_services(self) -> list[str]:
        """Identifiers switched on in the service map, in sorted order."""
        return sorted(name for name, enabled in self.services.items() if enabled)

    def service_enabled(self, kind: ServiceKind) -> bool:
        return bool(self.services.get(kind.value))

    def effective_source_cidr_ranges(self) -> list[str]:
        return list(self.source_cidr_ranges or DEFAULT_SOURCE_CIDR_RANGES)

    def effective_db_domain(self) -> str:
        """Domain from ``db_unique_name`` when it has a suffix, else ``db_domain``."""
        if "." in self.db_unique_name:
            return self.db_unique_name.split(".", 1)[1]
        return self.db_domain


class Backup(_InputModel):
    """A backup record; owner of the snapshots taken for it."""

    api_version: ClassVar[str] = API_VERSION
    kind: ClassVar[str] = "Backup"

    name: str = Field(min_length=1)
    namespace: str = "default"
    uid: str = ""
    instance: str = ""

    @property
    def metadata(self) -> ObjectMeta:
        return ObjectMeta(name=self.name, namespace=self.namespace, uid=self.uid or None)


class GlobalConfig(_InputModel):
    """Cluster-wide override singleton. Every field is optional."""

    platform: str = ""
    storage_class: str = ""
    volume_snapshot_class: str = ""
    disks: tuple[DiskRequest, ...] = ()
    log_level: dict[str, str] = Field(default_factory=dict)
    host_anti_affinity_namespaces: tuple[str, ...] = ()


class RestoreRequest(_InputModel):
    """Restore every disk from the snapshots of a prior backup."""

    backup_id: str = ""


class ImageSet(_InputModel):
    """Container images by role."""

    service: str = ""
    dbinit: str = ""
    logging_sidecar: str = ""
    config: str = ""
    monitoring: str = ""


DEFAULT_DISKS: tuple[DiskRequest, ...] = (
    DiskRequest(name="DataDisk"),
    DiskRequest(name="LogDisk"),
)


class BuildParameters(BaseModel):
    """Everything a builder needs for one instance. Not persisted."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    instance: Instance
    config: GlobalConfig | None = None
    images: ImageSet = Field(default_factory=ImageSet)
    disks: tuple[DiskRequest, ...] = ()
    restore: RestoreRequest | None = None
    privilege_escalation: bool = False
    scheme: OwnerScheme = Field(default_factory=default_scheme)

    @property
    def effective_disks(self) -> tuple[DiskRequest, ...]:
        """Explicit disks, else the instance's disks, else Data+Log disks."""
        return self.disks or self.instance.disks or DEFAULT_DISKS

    @property
    def namespace(self) -> str:
        return self.instance.namespace

    @property
    def sts_name(self) -> str:
        return STS_NAME % self.instance.name

    @property
    def config_map_name(self) -> str:
        return CM_NAME % self.instance.name

    @property
    def agent_deployment_name(self) -> str:
        return AGENT_DEPLOYMENT_NAME % self.instance.name

    @property
    def cdb_name(self) -> str:
        return self.instance.cdb_name

    @property
    def db_domain(self) -> str:
        return self.instance.effective_db_domain()
