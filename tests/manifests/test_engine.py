"""Tests for dbspine.manifests.engine — synthesis, rendering, writing."""

from __future__ import annotations

import pytest
import yaml

from dbspine.core.errors import StorageClassUnresolvedError
from dbspine.manifests.engine import (
    InstanceManifests,
    render_manifests,
    synthesize,
    write_manifests,
)
from dbspine.manifests.models import BuildParameters, GlobalConfig
from dbspine.manifests.snapshots import new_snapshot


class TestSynthesize:
    def test_orcl1_without_config(self, params):
        manifests = synthesize(params)
        assert isinstance(manifests, InstanceManifests)
        assert manifests.service.metadata.name == "orcl1-svc"
        assert manifests.dbdaemon_service.metadata.name == "orcl1-dbdaemon-svc"
        assert manifests.agent_service.metadata.name == "orcl1-agent-svc"
        assert manifests.config_map.metadata.name == "orcl1-cm"
        assert manifests.statefulset.metadata.name == "orcl1-sts"
        assert manifests.agent_deployment.metadata.name == "orcl1-agent-deployment"

        data = manifests.pvcs[0]
        assert data.metadata.name == "orcl1-pvc-u02"
        assert data.spec.storage_class_name == "csi-gce-pd"
        assert data.spec.resources.requests == {"storage": "100Gi"}

    def test_every_top_level_resource_owned_by_instance(self, params, instance):
        for resource in synthesize(params).resources():
            (ref,) = resource.metadata.owner_references
            assert ref.uid == instance.uid
            assert ref.controller is True

    def test_resources_apply_order(self, params):
        kinds = [r.kind for r in synthesize(params).resources()]
        assert kinds == ["ConfigMap", "Service", "Service", "Service", "StatefulSet", "Deployment"]

    def test_node_exposure(self, params):
        assert synthesize(params, "node").service.spec.type == "NodePort"

    def test_deterministic(self, params):
        assert render_manifests(synthesize(params)) == render_manifests(synthesize(params))

    def test_kind_scenario(self, kind_params):
        manifests = synthesize(kind_params)
        pod = manifests.statefulset.spec.template.spec
        assert [c.name for c in pod.init_containers] == ["dbinit", "prepare-pv-container"]
        assert pod.containers[0].image_pull_policy == "IfNotPresent"

    def test_error_aborts_whole_build(self, instance, images):
        params = BuildParameters(instance=instance, images=images, config=GlobalConfig(platform="Mars"))
        with pytest.raises(StorageClassUnresolvedError):
            synthesize(params)


class TestRender:
    def test_multi_document_yaml(self, params):
        content = render_manifests(synthesize(params))
        assert content.startswith("# Generated by dbspine")
        documents = [d for d in yaml.safe_load_all(content) if d]
        assert [d["kind"] for d in documents] == [
            "ConfigMap",
            "Service",
            "Service",
            "Service",
            "StatefulSet",
            "Deployment",
        ]
        sts = documents[4]
        assert sts["spec"]["volumeClaimTemplates"][0]["metadata"]["name"] == "orcl1-pvc-u02"

    def test_keys_keep_insertion_order(self, params):
        content = render_manifests(synthesize(params), header=False)
        first = next(iter(yaml.safe_load_all(content)))
        assert list(first)[:3] == ["apiVersion", "kind", "metadata"]

    def test_render_resource_list(self, backup):
        snap = new_snapshot(backup, "orcl1-pvc-u02", "bkp1-u02", "csi-gce-pd-snapshot-class")
        content = render_manifests([snap], header=False)
        (document,) = list(yaml.safe_load_all(content))
        assert document["kind"] == "VolumeSnapshot"
        assert document["metadata"]["labels"] == {"snap": "bkp1-u02"}


class TestWrite:
    def test_write_creates_parent_dirs(self, tmp_path, params):
        target = tmp_path / "out" / "orcl1.yaml"
        content = render_manifests(synthesize(params))
        written = write_manifests(content, target)
        assert written == str(target)
        assert target.read_text(encoding="utf-8") == content
