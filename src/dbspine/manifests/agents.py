"""Agent deployment builder.

The control agent (and optional monitoring agent) run in their own
Deployment, decoupled from the database StatefulSet. A required pod
affinity on the ``instance`` label schedules the agent pod onto the node of
its database pod so control-plane calls stay node-local.
"""

from __future__ import annotations

from collections.abc import Sequence

from dbspine.core.logging import get_logger
from dbspine.manifests.constants import (
    CONFIG_AGENT_NAME,
    CONFIG_AGENT_PORT,
    DBDAEMON_PORT,
    DBDAEMON_SVC_NAME,
    HOSTNAME_TOPOLOGY_KEY,
    MONITORING_AGENT_NAME,
    MONITORING_AGENT_PORT,
)
from dbspine.manifests.models import BuildParameters, ServiceKind, parse_services
from dbspine.manifests.network import agent_selector
from dbspine.manifests.ownership import set_controller_reference
from dbspine.manifests.platforms import image_pull_policy
from dbspine.manifests.resources import (
    Affinity,
    Container,
    ContainerPort,
    Deployment,
    DeploymentSpec,
    LabelSelector,
    ObjectMeta,
    PodAffinity,
    PodAffinityTerm,
    PodSecurityContext,
    PodSpec,
    PodTemplateSpec,
    SecurityContext,
)
from dbspine.manifests.workload import log_level_args

logger = get_logger(__name__)


def new_agent_deployment(
    params: BuildParameters,
    services: Sequence[str] | None = None,
) -> Deployment:
    """Deployment running the control agent and enabled monitoring agents.

    ``services`` defaults to the services enabled on the instance.
    Unrecognized service identifiers are logged and skipped.
    """
    inst = params.instance
    name = params.agent_deployment_name
    labels = {**agent_selector(inst.name), "deployment": name}
    daemon_svc = DBDAEMON_SVC_NAME % inst.name
    pull_policy = image_pull_policy(params.config)
    escalation = params.privilege_escalation

    if services is None:
        services = inst.enabled_services()

    config_agent_args = [
        f"--port={CONFIG_AGENT_PORT}",
        f"--dbservice={daemon_svc}",
        f"--dbport={DBDAEMON_PORT}",
    ]
    config_agent_args.extend(log_level_args(params.config).get(CONFIG_AGENT_NAME, []))

    containers = [
        Container(
            name=CONFIG_AGENT_NAME,
            image=params.images.config,
            command=["/configagent"],
            args=config_agent_args,
            ports=[ContainerPort(name="ca-port", container_port=CONFIG_AGENT_PORT)],
            security_context=SecurityContext(allow_privilege_escalation=escalation),
            image_pull_policy=pull_policy,
        )
    ]

    logger.debug("enabling_services", services=list(services))
    for kind in parse_services(services):
        match kind:
            case ServiceKind.MONITORING:
                containers.append(
                    Container(
                        name=MONITORING_AGENT_NAME,
                        image=params.images.monitoring,
                        command=["/monitoring_agent"],
                        args=[f"--dbservice={daemon_svc}", f"--dbport={DBDAEMON_PORT}"],
                        ports=[ContainerPort(name="oe-port", container_port=MONITORING_AGENT_PORT)],
                        security_context=SecurityContext(allow_privilege_escalation=escalation),
                        image_pull_policy=pull_policy,
                    )
                )
            case ServiceKind.BACKUP | ServiceKind.LOGGING | ServiceKind.PATCHING | ServiceKind.HA:
                logger.debug("service_without_agent_container", service=kind.value)

    pod_spec = PodSpec(
        security_context=PodSecurityContext(),
        containers=containers,
        affinity=Affinity(
            pod_affinity=PodAffinity(
                required_during_scheduling_ignored_during_execution=[
                    PodAffinityTerm(
                        label_selector=LabelSelector(match_labels={"instance": inst.name}),
                        namespaces=[inst.namespace],
                        topology_key=HOSTNAME_TOPOLOGY_KEY,
                    )
                ]
            )
        ),
    )

    deployment = Deployment(
        metadata=ObjectMeta(name=name, namespace=inst.namespace),
        spec=DeploymentSpec(
            replicas=1,
            selector=LabelSelector(match_labels=labels),
            template=PodTemplateSpec(
                metadata=ObjectMeta(labels=labels, namespace=inst.namespace),
                spec=pod_spec,
            ),
        ),
    )
    set_controller_reference(inst, deployment, params.scheme)
    return deployment
