"""Engine settings for dbspine.

``EngineSettings`` collects the process-level knobs of the embedding
reconciler or CLI: default container images by role, logging, the default
exposure mode of the primary Service and the status-check timeout.

Override precedence: kwargs > ``DBSPINE_*`` env vars > field defaults.

Example::

    settings = EngineSettings.from_env(log_level="DEBUG")
    images = settings.images()
"""

from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field

from dbspine.manifests.constants import DIAL_TIMEOUT_SECONDS
from dbspine.manifests.models import ImageSet


class EngineSettings(BaseModel):
    """Process-level configuration for manifest synthesis."""

    # Images
    service_image: str = Field(
        default="oracle-db:19.3",
        description="Database engine image (also runs the control daemon)",
    )
    dbinit_image: str = Field(
        default="dbspine/dbinit:latest",
        description="Init image staging agent payloads",
    )
    logging_sidecar_image: str = Field(
        default="dbspine/loggingsidecar:latest",
        description="Log-shipping sidecar image",
    )
    config_agent_image: str = Field(
        default="dbspine/configagent:latest",
        description="Control-agent image",
    )
    monitoring_image: str = Field(
        default="dbspine/monitoring:latest",
        description="Monitoring agent image",
    )

    # Synthesis
    exposure: Literal["lb", "node"] = Field(
        default="lb",
        description="Primary Service exposure: load balancer or node port",
    )
    privilege_escalation: bool = Field(
        default=False,
        description="Allow containers to escalate privileges",
    )

    # Collaborators
    status_check_timeout_seconds: float = Field(
        default=DIAL_TIMEOUT_SECONDS,
        description="Deadline for the status-check call",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool | None = Field(
        default=None,
        description="JSON logs (None = auto-detect from tty)",
    )

    def images(self) -> ImageSet:
        """Return the configured images as an ``ImageSet``."""
        return ImageSet(
            service=self.service_image,
            dbinit=self.dbinit_image,
            logging_sidecar=self.logging_sidecar_image,
            config=self.config_agent_image,
            monitoring=self.monitoring_image,
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> EngineSettings:
        """Create settings from DBSPINE_* environment variables."""
        env_map = {
            "service_image": "DBSPINE_SERVICE_IMAGE",
            "dbinit_image": "DBSPINE_DBINIT_IMAGE",
            "logging_sidecar_image": "DBSPINE_LOGGING_SIDECAR_IMAGE",
            "config_agent_image": "DBSPINE_CONFIG_AGENT_IMAGE",
            "monitoring_image": "DBSPINE_MONITORING_IMAGE",
            "exposure": "DBSPINE_EXPOSURE",
            "privilege_escalation": "DBSPINE_PRIVILEGE_ESCALATION",
            "status_check_timeout_seconds": "DBSPINE_STATUS_CHECK_TIMEOUT",
            "log_level": "DBSPINE_LOG_LEVEL",
            "log_json": "DBSPINE_LOG_JSON",
        }
        values: dict[str, Any] = {}
        for field_name, env_var in env_map.items():
            env_val = os.environ.get(env_var)
            if env_val is not None:
                if field_name in ("privilege_escalation", "log_json"):
                    values[field_name] = env_val.lower() in ("true", "1", "yes")
                elif field_name == "status_check_timeout_seconds":
                    values[field_name] = float(env_val)
                else:
                    values[field_name] = env_val
        values.update(overrides)
        return cls(**values)
