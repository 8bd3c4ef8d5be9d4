from __future__ import annotations

import msgspec
import pytest

from multi_build.build_step import BuildStep
from multi_build.config import StandaloneBuildSubtarget
from multi_build.host import (
    BuildHost,
    BuildPlayerOptions,
    BuildReport,
    BuildResult,
    BuildState,
)

ALL_BUILD_TARGETS = {
    "StandaloneWindows64",
    "StandaloneLinux64",
    "StandaloneOSX",
    "Android",
}


class FakeHost(BuildHost):
    """Records every call and keeps the editor build state in memory."""

    def __init__(
        self,
        supported: set[str] | None = None,
        failing_targets: tuple[str, ...] = (),
        appendable: bool = False,
        state: BuildState | None = None,
    ) -> None:
        self.supported = ALL_BUILD_TARGETS if supported is None else supported
        self.failing_targets = failing_targets
        self.appendable = appendable
        self.state = state or BuildState(
            active_build_target="StandaloneWindows64",
            target_group="Standalone",
            standalone_subtarget=StandaloneBuildSubtarget.player,
            product_name="Original",
        )
        self.calls: list[tuple] = []
        self.built: list[BuildPlayerOptions] = []
        self.built_product_names: list[str] = []

    def __enter__(self) -> FakeHost:
        return self

    def __exit__(self, *args) -> None:
        pass

    def supported_build_targets(self) -> set[str]:
        self.calls.append(("supported_build_targets",))
        return set(self.supported)

    def get_build_state(self) -> BuildState:
        self.calls.append(("get_build_state",))
        return msgspec.structs.replace(self.state)

    def set_product_name(self, product_name: str) -> None:
        self.calls.append(("set_product_name", product_name))
        self.state.product_name = product_name

    def set_standalone_subtarget(self, subtarget: StandaloneBuildSubtarget) -> None:
        self.calls.append(("set_standalone_subtarget", subtarget))
        self.state.standalone_subtarget = subtarget

    def switch_active_build_target(self, target_group, build_target, subtarget=None):
        self.calls.append(("switch_active_build_target", target_group, build_target))
        self.state.active_build_target = build_target
        self.state.target_group = target_group
        if subtarget is not None:
            self.state.standalone_subtarget = subtarget

    def can_append(self, build_target: str, location_path: str) -> bool:
        self.calls.append(("can_append", build_target, location_path))
        return self.appendable

    def build_player(self, options: BuildPlayerOptions) -> BuildReport:
        self.calls.append(("build_player", options.target))
        self.built.append(options)
        self.built_product_names.append(self.state.product_name)
        self.state.active_build_target = options.target
        self.state.target_group = options.target_group
        if options.target in self.failing_targets:
            return BuildReport(result=BuildResult.failed, total_seconds=0.5)
        return BuildReport(result=BuildResult.succeeded, total_seconds=12.25)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture(autouse=True)
def clear_build_step_events():
    yield
    BuildStep.clear_all()


@pytest.fixture
def events() -> dict[str, list]:
    recorded: dict[str, list] = {
        "start": [],
        "message": [],
        "warning": [],
        "error": [],
        "progress": [],
        "end": [],
    }
    BuildStep.start.set(recorded["start"].append)
    BuildStep.long_message.set(recorded["message"].append)
    BuildStep.warning.set(recorded["warning"].append)
    BuildStep.error.set(recorded["error"].append)
    BuildStep.progress.set(lambda current, total: recorded["progress"].append((current, total)))
    BuildStep.end.set(lambda name, status: recorded["end"].append((name, status)))
    return recorded
