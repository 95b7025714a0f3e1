"""Tests for dbspine.manifests.platforms — default table and attribute resolver."""

from __future__ import annotations

import pytest

from dbspine.core.errors import (
    ConfigResolutionError,
    UnknownPlatformError,
    UnsupportedAttributeError,
)
from dbspine.manifests.models import GlobalConfig
from dbspine.manifests.platforms import (
    DEFAULT_PLATFORM,
    PLATFORMS,
    Attribute,
    Platform,
    PlatformProfile,
    effective_platform,
    get_platform,
    image_pull_policy,
    is_hostpath_platform,
    resolve_attribute,
)


class TestPlatformTable:
    def test_four_platforms(self):
        assert set(PLATFORMS) == {"GCP", "BareMetal", "Minikube", "Kind"}

    @pytest.mark.parametrize(
        "name,storage,snapshot",
        [
            ("GCP", "csi-gce-pd", "csi-gce-pd-snapshot-class"),
            ("BareMetal", "csi-trident", "csi-trident-snapshot-class"),
            ("Minikube", "csi-hostpath-sc", "csi-hostpath-snapclass"),
            ("Kind", "csi-hostpath-sc", "csi-hostpath-snapclass"),
        ],
    )
    def test_defaults(self, name, storage, snapshot):
        assert get_platform(name) == PlatformProfile(storage, snapshot)

    def test_profiles_are_frozen(self):
        from dataclasses import FrozenInstanceError

        with pytest.raises(FrozenInstanceError):
            PLATFORMS["GCP"].storage_class = "other"  # type: ignore[misc]

    def test_unknown_platform(self):
        with pytest.raises(UnknownPlatformError) as exc_info:
            get_platform("Mars")
        assert exc_info.value.platform == "Mars"
        assert exc_info.value.context.metadata["available"] == sorted(PLATFORMS)

    def test_platform_ids_are_case_sensitive(self):
        with pytest.raises(UnknownPlatformError):
            get_platform("gcp")

    def test_default_platform(self):
        assert DEFAULT_PLATFORM is Platform.GCP
        assert effective_platform(None) == "GCP"
        assert effective_platform(GlobalConfig()) == "GCP"
        assert effective_platform(GlobalConfig(platform="BareMetal")) == "BareMetal"

    def test_hostpath_platforms(self):
        assert is_hostpath_platform(GlobalConfig(platform="Kind"))
        assert is_hostpath_platform(GlobalConfig(platform="Minikube"))
        assert not is_hostpath_platform(GlobalConfig(platform="GCP"))
        assert not is_hostpath_platform(None)

    def test_image_pull_policy(self):
        assert image_pull_policy(GlobalConfig(platform="Kind")) == "IfNotPresent"
        assert image_pull_policy(GlobalConfig(platform="Minikube")) == "Always"
        assert image_pull_policy(None) == "Always"


class TestResolveAttribute:
    @pytest.mark.parametrize("platform", list(PLATFORMS))
    def test_platform_default_without_override(self, platform):
        config = GlobalConfig(platform=platform)
        assert resolve_attribute(Attribute.STORAGE_CLASS, None, config) == PLATFORMS[platform].storage_class
        assert (
            resolve_attribute(Attribute.VOLUME_SNAPSHOT_CLASS, None, config)
            == PLATFORMS[platform].volume_snapshot_class
        )

    @pytest.mark.parametrize("config", [None, GlobalConfig(platform="Kind", storage_class="other")])
    def test_explicit_value_returned_unchanged(self, config):
        assert resolve_attribute("StorageClass", "my-fast-ssd", config) == "my-fast-ssd"

    def test_explicit_value_skips_platform_lookup(self):
        assert resolve_attribute("StorageClass", "x", GlobalConfig(platform="Mars")) == "x"

    def test_no_config_uses_gcp(self):
        assert resolve_attribute("StorageClass", None, None) == "csi-gce-pd"
        assert resolve_attribute("VolumeSnapshotClass", "", None) == "csi-gce-pd-snapshot-class"

    def test_config_override_wins_over_platform(self):
        config = GlobalConfig(platform="Kind", storage_class="local-path", volume_snapshot_class="snap")
        assert resolve_attribute("StorageClass", None, config) == "local-path"
        assert resolve_attribute("VolumeSnapshotClass", None, config) == "snap"

    def test_empty_override_falls_through(self):
        config = GlobalConfig(platform="BareMetal", storage_class="")
        assert resolve_attribute("StorageClass", None, config) == "csi-trident"

    def test_kebab_case_aliases(self):
        assert resolve_attribute("storage-class", None, None) == "csi-gce-pd"
        assert resolve_attribute("snapshot-class", None, None) == "csi-gce-pd-snapshot-class"

    def test_unknown_platform_is_resolution_error(self):
        with pytest.raises(ConfigResolutionError):
            resolve_attribute("StorageClass", None, GlobalConfig(platform="Mars"))

    def test_unsupported_attribute(self):
        with pytest.raises(UnsupportedAttributeError) as exc_info:
            resolve_attribute("NodeSelector", None, None)
        assert exc_info.value.attribute == "NodeSelector"
        assert "StorageClass" in exc_info.value.message

    def test_empty_final_value_is_error(self, monkeypatch):
        from dbspine.manifests import platforms

        monkeypatch.setitem(platforms.PLATFORMS, "Empty", PlatformProfile("", ""))
        with pytest.raises(ConfigResolutionError):
            resolve_attribute("StorageClass", None, GlobalConfig(platform="Empty"))

    def test_deterministic(self):
        config = GlobalConfig(platform="Minikube")
        results = {resolve_attribute("StorageClass", None, config) for _ in range(5)}
        assert results == {"csi-hostpath-sc"}
