"""Workload template builder.

Builds the database pod template and the StatefulSet that wraps it.

Pod layout::

    init:  dbinit                  stage agent payloads into /agents
           prepare-pv-container    (Minikube/Kind only) chown data mounts
    main:  oracledb                database engine
           dbdaemon                control daemon (port 3203)
           alert-log-sidecar       tails the alert log
           listener-log-sidecar    tails the listener log

Shared volumes: ``var-tmp`` (/var/tmp) and ``agent-repo`` (/agents), both
emptyDir, plus one claim per disk.
"""

from __future__ import annotations

from dbspine.core.logging import get_logger
from dbspine.manifests.constants import (
    DATABASE_POD_APP_LABEL,
    DBDAEMON_PORT,
    DEFAULT_GID,
    DEFAULT_UID,
    HOSTNAME_TOPOLOGY_KEY,
    LOG_LEVEL_AGENTS,
    SAFE_MIN_MEMORY_FOR_DB_CONTAINER,
    SCRIPTS_DIR,
    SECURE_LISTENER_PORT,
    SSL_LISTENER_PORT,
)
from dbspine.manifests.disks import pvc_name_and_mount
from dbspine.manifests.models import BuildParameters, GlobalConfig
from dbspine.manifests.ownership import set_controller_reference
from dbspine.manifests.platforms import image_pull_policy, is_hostpath_platform
from dbspine.manifests.resources import (
    Affinity,
    ConfigMapEnvSource,
    Container,
    ContainerPort,
    EmptyDirVolumeSource,
    EnvFromSource,
    LabelSelector,
    ObjectMeta,
    PersistentVolumeClaim,
    PodAffinityTerm,
    PodAntiAffinity,
    PodSecurityContext,
    PodSpec,
    PodTemplateSpec,
    ResourceRequirements,
    SecurityContext,
    StatefulSet,
    StatefulSetSpec,
    Volume,
    VolumeMount,
)
from dbspine.manifests.storage import pvc_mounts

logger = get_logger(__name__)

HOSTPATH_INIT_IMAGE = "busybox:latest"


def log_level_args(config: GlobalConfig | None) -> dict[str, list[str]]:
    """Verbosity flags for the agents configured in ``GlobalConfig.log_level``."""
    if config is None:
        return {}
    args: dict[str, list[str]] = {}
    for name in LOG_LEVEL_AGENTS:
        level = config.log_level.get(name, "")
        args[name] = [f"--v={level}"] if level else []
    return args


def _shared_mounts() -> list[VolumeMount]:
    return [
        VolumeMount(name="var-tmp", mount_path="/var/tmp"),
        VolumeMount(name="agent-repo", mount_path=SCRIPTS_DIR),
    ]


def _log_sidecar(name: str, log_type: str, params: BuildParameters, pull_policy: str) -> Container:
    data_pvc, data_mount = pvc_name_and_mount(params.instance.name, "DataDisk")
    return Container(
        name=name,
        image=params.images.logging_sidecar,
        command=["/logging_main"],
        args=[f"--logType={log_type}"],
        security_context=SecurityContext(allow_privilege_escalation=params.privilege_escalation),
        volume_mounts=_shared_mounts() + [VolumeMount(name=data_pvc, mount_path=f"/{data_mount}")],
        image_pull_policy=pull_policy,
    )


def hostpath_init_container(params: BuildParameters, uid: int, gid: int) -> Container:
    """Root init container handing every data mount to the database user."""
    mounts = pvc_mounts(params)
    cmd = " && ".join(f"chown {uid}:{gid} {m.mount_path}" for m in mounts)
    logger.info("hostpath_init_container", cmd=cmd)
    return Container(
        name="prepare-pv-container",
        image=HOSTPATH_INIT_IMAGE,
        command=["sh", "-c", cmd],
        security_context=SecurityContext(
            run_as_user=0,
            run_as_group=0,
            run_as_non_root=False,
            allow_privilege_escalation=params.privilege_escalation,
        ),
        volume_mounts=mounts,
    )


def new_pod_template(params: BuildParameters) -> PodTemplateSpec:
    """Pod template for the database StatefulSet."""
    inst = params.instance
    labels = {
        "instance": inst.name,
        "statefulset": params.sts_name,
        "app": DATABASE_POD_APP_LABEL,
    }

    min_memory = SAFE_MIN_MEMORY_FOR_DB_CONTAINER
    if inst.min_memory_for_db_container:
        logger.info(
            "min_memory_override",
            default=SAFE_MIN_MEMORY_FOR_DB_CONTAINER,
            requested=inst.min_memory_for_db_container,
        )
        min_memory = inst.min_memory_for_db_container

    pull_policy = image_pull_policy(params.config)
    escalation = params.privilege_escalation
    disk_mounts = pvc_mounts(params)

    logger.info("pod_template", image=params.images.service, instance=inst.name)
    containers = [
        Container(
            name="oracledb",
            image=params.images.service,
            command=[f"{SCRIPTS_DIR}/init_oracle.sh"],
            args=[params.cdb_name, params.db_domain],
            resources=ResourceRequirements(requests={"memory": min_memory}),
            ports=[
                ContainerPort(name="secure-listener", container_port=SECURE_LISTENER_PORT),
                ContainerPort(name="ssl-listener", container_port=SSL_LISTENER_PORT),
            ],
            volume_mounts=_shared_mounts() + disk_mounts,
            security_context=SecurityContext(allow_privilege_escalation=escalation),
            env_from=[
                EnvFromSource(config_map_ref=ConfigMapEnvSource(name=params.config_map_name))
            ],
            image_pull_policy=pull_policy,
        ),
        Container(
            name="dbdaemon",
            image=params.images.service,
            command=[f"{SCRIPTS_DIR}/dbdaemon"],
            args=[f"--cdb_name={params.cdb_name}"],
            ports=[ContainerPort(name="dbdaemon", container_port=DBDAEMON_PORT)],
            volume_mounts=_shared_mounts() + disk_mounts,
            security_context=SecurityContext(allow_privilege_escalation=escalation),
            image_pull_policy=pull_policy,
        ),
        _log_sidecar("alert-log-sidecar", "ALERT", params, pull_policy),
        _log_sidecar("listener-log-sidecar", "LISTENER", params, pull_policy),
    ]

    init_containers = [
        Container(
            name="dbinit",
            image=params.images.dbinit,
            command=["sh", "-c", f"cp -r agent_repo/. {SCRIPTS_DIR}/ && chmod -R 750 {SCRIPTS_DIR}/*"],
            security_context=SecurityContext(allow_privilege_escalation=escalation),
            volume_mounts=[VolumeMount(name="agent-repo", mount_path=SCRIPTS_DIR)],
            image_pull_policy=pull_policy,
        )
    ]

    uid = inst.database_uid
    if uid is None:
        logger.info("default_pod_uid", uid=DEFAULT_UID)
        uid = DEFAULT_UID
    gid = inst.database_gid
    if gid is None:
        logger.info("default_pod_gid", gid=DEFAULT_GID)
        gid = DEFAULT_GID

    if is_hostpath_platform(params.config):
        init_containers.append(hostpath_init_container(params, uid, gid))

    anti_affinity_namespaces = None
    if params.config is not None and params.config.host_anti_affinity_namespaces:
        anti_affinity_namespaces = list(params.config.host_anti_affinity_namespaces)

    spec = PodSpec(
        security_context=PodSecurityContext(
            run_as_user=uid,
            run_as_group=gid,
            fs_group=gid,
            run_as_non_root=True,
        ),
        init_containers=init_containers,
        containers=containers,
        share_process_namespace=True,
        volumes=[
            Volume(name="var-tmp", empty_dir=EmptyDirVolumeSource()),
            Volume(name="agent-repo", empty_dir=EmptyDirVolumeSource()),
        ],
        affinity=Affinity(
            pod_anti_affinity=PodAntiAffinity(
                required_during_scheduling_ignored_during_execution=[
                    PodAffinityTerm(
                        label_selector=LabelSelector(match_labels={"app": DATABASE_POD_APP_LABEL}),
                        namespaces=anti_affinity_namespaces,
                        topology_key=HOSTNAME_TOPOLOGY_KEY,
                    )
                ]
            )
        ),
    )

    return PodTemplateSpec(
        metadata=ObjectMeta(labels=labels, namespace=params.namespace),
        spec=spec,
    )


def new_statefulset(
    params: BuildParameters,
    pvcs: list[PersistentVolumeClaim],
    template: PodTemplateSpec,
) -> StatefulSet:
    """Single-replica StatefulSet owning the claim templates."""
    sts = StatefulSet(
        metadata=ObjectMeta(name=params.sts_name, namespace=params.namespace),
        spec=StatefulSetSpec(
            replicas=1,
            selector=LabelSelector(
                match_labels={"instance": params.instance.name, "statefulset": params.sts_name}
            ),
            template=template,
            volume_claim_templates=pvcs,
        ),
    )
    set_controller_reference(params.instance, sts, params.scheme)
    return sts
