"""Network resource builder and endpoint address extraction.

Three Services per instance:

    {inst}-svc[-node]    primary data endpoint (LoadBalancer or NodePort)
    {inst}-dbdaemon-svc  control-daemon endpoint (ClusterIP)
    {inst}-agent-svc     agent endpoint (ClusterIP, selects the agent pod)

The primary and daemon Services select the database pod through the
``instance`` label; the agent Service selects the agent Deployment through
``instance-agent`` so the two workloads are placed and scaled independently.
"""

from __future__ import annotations

from typing import Literal

from dbspine.manifests.constants import (
    AGENT_SVC_NAME,
    CONFIG_AGENT_NAME,
    CONFIG_AGENT_PORT,
    DBDAEMON_PORT,
    DBDAEMON_SVC_NAME,
    INTERNAL_LB_ANNOTATION,
    MONITORING_AGENT_NAME,
    MONITORING_AGENT_PORT,
    SECURE_LISTENER_PORT,
    SSL_LISTENER_PORT,
    SVC_NAME,
)
from dbspine.manifests.models import Instance, ServiceKind
from dbspine.manifests.ownership import OwnerScheme, set_controller_reference
from dbspine.manifests.resources import ObjectMeta, Service, ServicePort, ServiceSpec

Exposure = Literal["lb", "node"]


def agent_selector(instance_name: str) -> dict[str, str]:
    return {"instance-agent": f"{instance_name}-agent"}


def new_service(
    instance: Instance,
    exposure: Exposure = "lb",
    scheme: OwnerScheme | None = None,
) -> Service:
    """Primary data endpoint exposing the secure and SSL listeners."""
    name = SVC_NAME % instance.name
    annotations: dict[str, str] | None = None
    source_ranges: list[str] | None = None

    if exposure == "node":
        svc_type = "NodePort"
        name = f"{name}-{exposure}"
    else:
        svc_type = "LoadBalancer"
        source_ranges = instance.effective_source_cidr_ranges()
        if instance.network is not None and instance.network.load_balancer_type == "Internal":
            annotations = {INTERNAL_LB_ANNOTATION: "Internal"}

    svc = Service(
        metadata=ObjectMeta(name=name, namespace=instance.namespace, annotations=annotations),
        spec=ServiceSpec(
            selector={"instance": instance.name},
            ports=[
                ServicePort(
                    name="secure-listener",
                    port=SECURE_LISTENER_PORT,
                    target_port=SECURE_LISTENER_PORT,
                ),
                ServicePort(
                    name="ssl-listener",
                    port=SSL_LISTENER_PORT,
                    target_port=SSL_LISTENER_PORT,
                ),
            ],
            type=svc_type,
            load_balancer_source_ranges=source_ranges,
        ),
    )
    set_controller_reference(instance, svc, scheme)
    return svc


def new_dbdaemon_service(instance: Instance, scheme: OwnerScheme | None = None) -> Service:
    """Cluster-internal control-daemon endpoint."""
    svc = Service(
        metadata=ObjectMeta(name=DBDAEMON_SVC_NAME % instance.name, namespace=instance.namespace),
        spec=ServiceSpec(
            selector={"instance": instance.name},
            ports=[ServicePort(name="dbdaemon", port=DBDAEMON_PORT, target_port=DBDAEMON_PORT)],
            type="ClusterIP",
        ),
    )
    set_controller_reference(instance, svc, scheme)
    return svc


def new_agent_service(instance: Instance, scheme: OwnerScheme | None = None) -> Service:
    """Cluster-internal agent endpoint; adds the monitoring port when enabled."""
    ports = [
        ServicePort(name=CONFIG_AGENT_NAME, port=CONFIG_AGENT_PORT, target_port=CONFIG_AGENT_PORT)
    ]
    if instance.service_enabled(ServiceKind.MONITORING):
        ports.append(ServicePort(name=MONITORING_AGENT_NAME, port=MONITORING_AGENT_PORT))

    svc = Service(
        metadata=ObjectMeta(
            name=AGENT_SVC_NAME % instance.name,
            namespace=instance.namespace,
            labels={"app": "agent-svc"},
        ),
        spec=ServiceSpec(
            selector=agent_selector(instance.name),
            ports=ports,
            type="ClusterIP",
        ),
    )
    set_controller_reference(instance, svc, scheme)
    return svc


def service_url(svc: Service, port: int) -> str:
    """Connectable ``host:port`` of a load-balanced Service.

    Returns an empty string while no ingress has been assigned; callers treat
    that as "not ready yet".
    """
    if svc.status is None or not svc.status.load_balancer.ingress:
        return ""

    ingress = svc.status.load_balancer.ingress[0]
    host = ingress.hostname or ingress.ip or ""
    if not host:
        return ""
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
