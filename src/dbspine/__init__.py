"""
dbspine - declarative manifest synthesis for database instances on Kubernetes.

Packages:
- dbspine.core: errors, structured logging, engine settings
- dbspine.manifests: entities, resolvers and resource builders
- dbspine.protos: protobuf contract of the ConfigAgent status check
- dbspine.cli: ``dbspine`` command-line interface
"""

__version__ = "0.1.0"
