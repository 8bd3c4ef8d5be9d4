"""Tests for multi_build/config.py - persisted build profiles"""

from pathlib import Path

import msgspec
import pytest

from multi_build.config import (
    BuildProfile,
    Config,
    StandaloneBuildSubtarget,
    TargetPlatform,
)

CONFIG_YAML = """
project_path: /projects/BlackMesa
profiles:
  - name: Desktop
    target: Windows64
    scenes:
      - Assets/Scenes/Boot.unity
      - Assets/Scenes/Lambda.unity
  - null
  - name: Server
    target: Linux64
    subtarget: Server
    product_name: BlackMesaServer
    build_path: Builds/Server
"""


class TestConfigLoad:
    def test_missing_file_is_created(self, tmp_path: Path) -> None:
        config_path = tmp_path / "MultiBuild" / "config.yaml"
        config = Config.load(config_path)
        assert config_path.exists()
        assert config.profiles == []
        assert config.project_path == "."
        assert config.editor_path is None

    def test_profiles_with_empty_slots(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(CONFIG_YAML, encoding="utf-8")

        config = Config.load(config_path)

        assert config.project_path == "/projects/BlackMesa"
        assert len(config.profiles) == 3
        assert config.profiles[1] is None
        desktop, _, server = config.profiles
        assert desktop.target == TargetPlatform.windows64
        assert desktop.subtarget == StandaloneBuildSubtarget.player
        assert desktop.scenes == [
            "Assets/Scenes/Boot.unity",
            "Assets/Scenes/Lambda.unity",
        ]
        assert desktop.product_name == ""
        assert desktop.build_path == ""
        assert server.subtarget == StandaloneBuildSubtarget.server
        assert server.product_name == "BlackMesaServer"

    def test_empty_profile_name_is_invalid(self) -> None:
        with pytest.raises(msgspec.ValidationError):
            Config.loads("profiles:\n  - name: ''\n    target: Android\n")

    def test_unknown_target_is_invalid(self) -> None:
        with pytest.raises(msgspec.ValidationError):
            Config.loads("profiles:\n  - name: Web\n    target: WebGL\n")

    def test_save_keeps_empty_slots(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config = Config(
            profiles=[BuildProfile(name="Mobile", target=TargetPlatform.android), None]
        )
        config.save(config_path)

        loaded = Config.load(config_path)
        assert loaded.profiles[0].name == "Mobile"
        assert loaded.profiles[1] is None

    def test_get_profile(self) -> None:
        config = Config.loads(CONFIG_YAML)
        assert config.get_profile("Server").target == TargetPlatform.linux64
        assert config.get_profile("Missing") is None
