"""Tests for multi_build/cli - click commands"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from multi_build.cli import build as build_cli
from multi_build.cli.config import EXAMPLE_CONFIG
from multi_build.cli.main import cli
from multi_build.config import Config, TargetPlatform

from conftest import FakeHost

CONFIG_YAML = """
project_path: /projects/BlackMesa
profiles:
  - name: Desktop
    target: Windows64
  - null
  - name: Mobile
    target: Android
    product_name: BlackMesaMobile
"""


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


@pytest.fixture
def fake_host(monkeypatch: pytest.MonkeyPatch) -> FakeHost:
    host = FakeHost()
    monkeypatch.setattr(
        build_cli, "UnityHost", lambda project_path, editor_path: host
    )
    return host


class TestBuildCommand:
    def test_builds_all_profiles(self, config_path: Path, fake_host: FakeHost) -> None:
        result = CliRunner().invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        assert "Build 2 Platforms" in result.output
        assert [options.target for options in fake_host.built] == [
            "StandaloneWindows64",
            "Android",
        ]
        assert fake_host.state.product_name == "Original"

    def test_selected_profile(self, config_path: Path, fake_host: FakeHost) -> None:
        result = CliRunner().invoke(
            cli, ["build", "--config", str(config_path), "--profile", "Mobile"]
        )

        assert result.exit_code == 0, result.output
        assert "Build 1 Platform" in result.output
        assert [options.target for options in fake_host.built] == ["Android"]

    def test_unknown_profile(self, config_path: Path, fake_host: FakeHost) -> None:
        result = CliRunner().invoke(
            cli, ["build", "--config", str(config_path), "-p", "Console"]
        )

        assert result.exit_code == 1
        assert "Build profile 'Console' not found" in result.output
        assert fake_host.built == []

    def test_failed_build_exit_code(
        self, config_path: Path, fake_host: FakeHost
    ) -> None:
        fake_host.failing_targets = ("StandaloneWindows64",)

        result = CliRunner().invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert [options.target for options in fake_host.built] == [
            "StandaloneWindows64"
        ]

    def test_no_profiles(self, tmp_path: Path, fake_host: FakeHost) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text("profiles:\n  - null\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "No build profile to build" in result.output

    def test_invalid_config(self, tmp_path: Path, fake_host: FakeHost) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text("profiles:\n  - target: Android\n", encoding="utf-8")

        result = CliRunner().invoke(cli, ["build", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


class TestConfigCommand:
    def test_example_is_valid(self) -> None:
        config = Config.loads(EXAMPLE_CONFIG)
        assert [profile.target for profile in config.profiles] == [
            TargetPlatform.windows64,
            TargetPlatform.linux64,
            TargetPlatform.android,
        ]

    def test_show(self, config_path: Path) -> None:
        result = CliRunner().invoke(cli, ["config", "show", "--config", str(config_path)])
        assert result.exit_code == 0
        assert "name: Desktop" in result.output
