"""Fixed ports, identities, sizes and naming templates.

These values are shared with the agents running inside the generated pods
and are not derived from any input.
"""

from __future__ import annotations

# Ports
SECURE_LISTENER_PORT = 6021
SSL_LISTENER_PORT = 6022
DBDAEMON_PORT = 3203
CONFIG_AGENT_PORT = 3202
MONITORING_AGENT_PORT = 9161

# Container / agent names
CONFIG_AGENT_NAME = "config-agent"
OPERATOR_NAME = "operator"
MONITORING_AGENT_NAME = "oracle-monitoring"

# Agents whose verbosity can be set through GlobalConfig.log_level
LOG_LEVEL_AGENTS: tuple[str, ...] = (CONFIG_AGENT_NAME, OPERATOR_NAME)

# Process identity inside the database pod
DEFAULT_UID = 54321
DEFAULT_GID = 54322

# Capacities
SAFE_MIN_MEMORY_FOR_DB_CONTAINER = "4.0Gi"
DEFAULT_DISK_SIZE = "100Gi"

# Paths
SCRIPTS_DIR = "/agents"
INSTALL_DIR = "/stage"
HEALTHCHECK_DB_SCRIPT = "health-check-db.sh"

# Labels
DATABASE_POD_APP_LABEL = "db-op"
HOSTNAME_TOPOLOGY_KEY = "kubernetes.io/hostname"
INTERNAL_LB_ANNOTATION = "cloud.google.com/load-balancer-type"

# Never mutated; instances override it through source_cidr_ranges.
DEFAULT_SOURCE_CIDR_RANGES: tuple[str, ...] = ("0.0.0.0/0",)

# Status-check collaborator
DIAL_TIMEOUT_SECONDS = 180.0

# Naming templates (all keyed on the instance name)
SVC_NAME = "%s-svc"
DBDAEMON_SVC_NAME = "%s-dbdaemon-svc"
AGENT_SVC_NAME = "%s-agent-svc"
STS_NAME = "%s-sts"
CM_NAME = "%s-cm"
AGENT_DEPLOYMENT_NAME = "%s-agent-deployment"
PVC_NAME = "%s-pvc-%s"

# Owner entities
API_GROUP = "oracle.db.anthosapis.com"
API_VERSION = f"{API_GROUP}/v1alpha1"
SNAPSHOT_API_GROUP = "snapshot.storage.k8s.io"
