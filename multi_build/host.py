from enum import Enum

from msgspec import Struct

from multi_build.config import StandaloneBuildSubtarget


class BuildState(Struct, kw_only=True):
    """Global editor build settings that a build run changes and puts back."""

    active_build_target: str
    target_group: str
    standalone_subtarget: StandaloneBuildSubtarget | None = None
    product_name: str


class BuildOption(str, Enum):
    none = "None"
    accept_external_modifications = "AcceptExternalModificationsToPlayer"


class BuildPlayerOptions(Struct, kw_only=True):
    target: str
    target_group: str
    subtarget: StandaloneBuildSubtarget | None = None
    scenes: list[str] = []
    location_path: str
    options: BuildOption = BuildOption.none


class BuildResult(str, Enum):
    unknown = "Unknown"
    succeeded = "Succeeded"
    failed = "Failed"
    cancelled = "Cancelled"


class BuildReport(Struct, kw_only=True):
    result: BuildResult
    total_seconds: float = 0.0

    @property
    def succeeded(self):
        return self.result == BuildResult.succeeded


class BuildHost:
    """Editor-side player build pipeline and global build settings.

    Implementations raise `BuildProcessError` when the editor cannot carry out
    a request.
    """

    def supported_build_targets(self) -> set[str]:
        raise NotImplementedError

    def get_build_state(self) -> BuildState:
        raise NotImplementedError

    def set_product_name(self, product_name: str):
        raise NotImplementedError

    def set_standalone_subtarget(self, subtarget: StandaloneBuildSubtarget):
        raise NotImplementedError

    def switch_active_build_target(
        self,
        target_group: str,
        build_target: str,
        subtarget: StandaloneBuildSubtarget | None = None,
    ):
        """Blocks until the editor has finished switching the active target."""
        raise NotImplementedError

    def can_append(self, build_target: str, location_path: str) -> bool:
        raise NotImplementedError

    def build_player(self, options: BuildPlayerOptions) -> BuildReport:
        raise NotImplementedError
