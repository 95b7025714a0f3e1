"""One-shot synthesis and YAML rendering.

``synthesize()`` calls every builder once, in dependency order, and returns
the complete resource bundle for an instance. It adds no behaviour of its
own: a reconciler that only needs one resource calls that builder directly.

Rendering produces a multi-document YAML string (one document per resource,
apply order) with a header comment, ready for ``kubectl apply -f -``.

Example::

    params = BuildParameters(instance=Instance(name="orcl1", uid="..."), images=images)
    manifests = synthesize(params)
    print(render_manifests(manifests))
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from dbspine.core.logging import LogContext, get_logger
from dbspine.manifests.agents import new_agent_deployment
from dbspine.manifests.configmap import new_config_map
from dbspine.manifests.models import BuildParameters
from dbspine.manifests.network import (
    Exposure,
    new_agent_service,
    new_dbdaemon_service,
    new_service,
)
from dbspine.manifests.resources import (
    ConfigMap,
    Deployment,
    PersistentVolumeClaim,
    Resource,
    Service,
    StatefulSet,
)
from dbspine.manifests.storage import new_pvcs
from dbspine.manifests.workload import new_pod_template, new_statefulset

logger = get_logger(__name__)


@dataclass
class InstanceManifests:
    """Every resource generated for one instance."""

    service: Service
    dbdaemon_service: Service
    agent_service: Service
    config_map: ConfigMap
    statefulset: StatefulSet
    agent_deployment: Deployment
    pvcs: list[PersistentVolumeClaim] = field(default_factory=list)

    def resources(self) -> list[Resource]:
        """Top-level resources in apply order.

        Claims are not listed: they are templates inside the StatefulSet.
        """
        return [
            self.config_map,
            self.service,
            self.dbdaemon_service,
            self.agent_service,
            self.statefulset,
            self.agent_deployment,
        ]


def synthesize(params: BuildParameters, exposure: Exposure = "lb") -> InstanceManifests:
    """Build the full resource set of an instance.

    Any builder error aborts the whole call; no partial bundle is returned.
    """
    inst = params.instance
    with LogContext(instance=inst.name, namespace=inst.namespace):
        logger.info("synthesize_start", exposure=exposure, disks=len(params.effective_disks))

        config_map = new_config_map(inst, params.config_map_name, params.scheme)
        service = new_service(inst, exposure, params.scheme)
        dbdaemon_service = new_dbdaemon_service(inst, params.scheme)
        agent_service = new_agent_service(inst, params.scheme)

        pvcs = new_pvcs(params)
        template = new_pod_template(params)
        statefulset = new_statefulset(params, pvcs, template)
        agent_deployment = new_agent_deployment(params)

        logger.info("synthesize_done", sts=statefulset.metadata.name, pvcs=len(pvcs))

    return InstanceManifests(
        service=service,
        dbdaemon_service=dbdaemon_service,
        agent_service=agent_service,
        config_map=config_map,
        statefulset=statefulset,
        agent_deployment=agent_deployment,
        pvcs=pvcs,
    )


def render_manifests(
    manifests: InstanceManifests | Iterable[Resource],
    header: bool = True,
) -> str:
    """Render resources as a multi-document YAML string."""
    if isinstance(manifests, InstanceManifests):
        resources = manifests.resources()
    else:
        resources = list(manifests)

    documents = [resource.to_manifest() for resource in resources]
    body = yaml.safe_dump_all(
        documents,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    if not header:
        return body
    return "# Generated by dbspine. Do not edit by hand.\n---\n" + body


def write_manifests(content: str, output_path: str | Path) -> str:
    """Write rendered manifests to ``output_path``; returns the path written."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("manifests_written", path=str(path))
    return str(path)
