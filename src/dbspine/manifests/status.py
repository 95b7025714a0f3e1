"""Status-check collaborator.

Asks the control agent of an instance whether provisioning has finished and
the database accepts connections. One unary gRPC call per invocation, bound
by a fixed deadline; failures surface as ``StatusCheckError`` and are never
retried here.

Messages are the protobuf ``CheckStatusRequest``/``CheckStatusResponse`` of
``dbspine/protos/config_agent.proto``, sent through ``ConfigAgentStub``.
"""

from __future__ import annotations

import grpc

from dbspine.core.errors import StatusCheckError, StatusCheckTimeoutError
from dbspine.core.logging import get_logger
from dbspine.manifests.constants import CONFIG_AGENT_PORT, DIAL_TIMEOUT_SECONDS
from dbspine.protos.config_agent import (
    CHECK_STATUS_INSTANCE,
    CheckStatusRequest,
    ConfigAgentStub,
)

logger = get_logger(__name__)


def build_request(instance_name: str, cdb_name: str, db_domain: str) -> CheckStatusRequest:
    """Instance-level ``CheckStatusRequest``."""
    return CheckStatusRequest(
        name=instance_name,
        cdb_name=cdb_name,
        check_status_type=CHECK_STATUS_INSTANCE,
        db_domain=db_domain,
    )


def check_instance_status(
    instance_name: str,
    cdb_name: str,
    address: str,
    db_domain: str,
    *,
    channel: grpc.Channel | None = None,
    timeout: float = DIAL_TIMEOUT_SECONDS,
) -> str:
    """Return the status string reported by the instance's control agent.

    ``address`` is the agent Service address; the agent port is appended.
    A caller-supplied ``channel`` is used as is and left open.

    Raises
    ------
    StatusCheckTimeoutError
        The call did not complete within ``timeout`` seconds.
    StatusCheckError
        Dial failure or remote error.
    """
    target = f"{address}:{CONFIG_AGENT_PORT}"
    logger.info("check_status_instance", instance=instance_name, target=target)

    owns_channel = channel is None
    if channel is None:
        channel = grpc.insecure_channel(target)

    try:
        stub = ConfigAgentStub(channel)
        response = stub.CheckStatus(
            build_request(instance_name, cdb_name, db_domain),
            timeout=timeout,
            wait_for_ready=True,
        )
    except grpc.RpcError as exc:
        code = exc.code() if hasattr(exc, "code") else grpc.StatusCode.UNKNOWN
        detail = exc.details() if hasattr(exc, "details") else str(exc)
        if code == grpc.StatusCode.DEADLINE_EXCEEDED:
            raise StatusCheckTimeoutError(
                f"CheckStatus on {target} timed out after {timeout}s", cause=exc
            ).with_context(instance=instance_name) from exc
        raise StatusCheckError(
            f"CheckStatus on {target} failed ({code.name}): {detail}", cause=exc
        ).with_context(instance=instance_name) from exc
    finally:
        if owns_channel:
            channel.close()

    logger.info("check_status_instance_done", instance=instance_name, status=response.status)
    return response.status
