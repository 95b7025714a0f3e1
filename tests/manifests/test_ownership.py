"""Tests for dbspine.manifests.ownership — controller owner references."""

from __future__ import annotations

import pytest

from dbspine.core.errors import AlreadyOwnedError, OwnershipError
from dbspine.manifests.constants import API_VERSION
from dbspine.manifests.models import Backup, Instance
from dbspine.manifests.ownership import OwnerScheme, default_scheme, set_controller_reference
from dbspine.manifests.resources import ConfigMap, HasMetadata, ObjectMeta


def _cm(namespace: str = "db") -> ConfigMap:
    return ConfigMap(metadata=ObjectMeta(name="orcl1-cm", namespace=namespace))


class TestOwnerScheme:
    def test_default_scheme_registers_instance_and_backup(self, instance, backup):
        scheme = default_scheme()
        assert scheme.recognizes(instance)
        assert scheme.recognizes(backup)

    def test_entities_satisfy_protocol(self, instance, backup):
        assert isinstance(instance, HasMetadata)
        assert isinstance(backup, HasMetadata)
        assert isinstance(_cm(), HasMetadata)


class TestSetControllerReference:
    def test_links_owner(self, instance):
        cm = _cm()
        set_controller_reference(instance, cm)
        (ref,) = cm.metadata.owner_references
        assert ref.api_version == API_VERSION
        assert ref.kind == "Instance"
        assert ref.name == "orcl1"
        assert ref.uid == instance.uid
        assert ref.controller is True
        assert ref.block_owner_deletion is True

    def test_manifest_shape(self, instance):
        cm = _cm()
        set_controller_reference(instance, cm)
        refs = cm.to_manifest()["metadata"]["ownerReferences"]
        assert refs == [
            {
                "apiVersion": API_VERSION,
                "kind": "Instance",
                "name": "orcl1",
                "uid": instance.uid,
                "controller": True,
                "blockOwnerDeletion": True,
            }
        ]

    def test_relinking_same_owner_is_idempotent(self, instance):
        cm = _cm()
        set_controller_reference(instance, cm)
        set_controller_reference(instance, cm)
        assert len(cm.metadata.owner_references) == 1

    def test_other_controller_rejected(self, instance, backup):
        cm = _cm()
        set_controller_reference(backup, cm)
        with pytest.raises(AlreadyOwnedError):
            set_controller_reference(instance, cm)

    def test_unregistered_kind_rejected(self, instance):
        with pytest.raises(OwnershipError, match="not registered"):
            set_controller_reference(instance, _cm(), OwnerScheme(kinds=frozenset()))

    def test_missing_uid_rejected(self):
        with pytest.raises(OwnershipError, match="no name or uid"):
            set_controller_reference(Instance(name="orcl1", namespace="db"), _cm())

    def test_cross_namespace_rejected(self, instance):
        with pytest.raises(OwnershipError, match="cross-namespace") as exc_info:
            set_controller_reference(instance, _cm(namespace="other"))
        assert exc_info.value.context.resource_kind == "ConfigMap"
        assert exc_info.value.context.resource_name == "orcl1-cm"

    def test_custom_scheme(self):
        backup = Backup(name="b", namespace="db", uid="u")
        scheme = OwnerScheme(kinds=frozenset({(API_VERSION, "Backup")}))
        cm = _cm()
        set_controller_reference(backup, cm, scheme)
        assert cm.metadata.owner_references[0].kind == "Backup"
