from typing import Callable, Iterable

from multi_build.build_step import BuildStep, ProgressStatus
from multi_build.config import BuildProfile
from multi_build.exceptions import BuildProcessError
from multi_build.host import BuildHost, BuildOption, BuildPlayerOptions, BuildState
from multi_build.platforms import (
    STANDALONE_GROUP,
    get_location_path,
    get_platform_info,
)

BUILD_ALL_STEP = "Build All"


def remove_null_profiles(profiles: Iterable[BuildProfile | None]):
    return [profile for profile in profiles if profile is not None]


def remove_unsupported_profiles(
    profiles: Iterable[BuildProfile], supported_build_targets: set[str]
):
    supported_profiles = []
    for profile in profiles:
        build_target = get_platform_info(profile.target).build_target
        if build_target not in supported_build_targets:
            BuildStep.warning.emit(
                f"{build_target} is unsupported. Removing {profile.name} build profile"
            )
            continue
        supported_profiles.append(profile)
    return supported_profiles


def format_seconds(seconds: float):
    return f"{seconds:.2f}".rstrip("0").rstrip(".")


def get_build_prompt(enabled_count: int):
    if enabled_count == 0:
        return None
    if enabled_count == 1:
        return "Build 1 Platform"
    return f"Build {enabled_count} Platforms"


class BuildOrchestrator:
    """Builds a list of profiles one after the other through a `BuildHost`.

    The global build state of the host (active target and product name) is
    captured before the first build and restored once the sequence is over,
    whether it succeeded or not. The first failed build stops the sequence.
    """

    def __init__(
        self,
        host: BuildHost,
        profiles: Iterable[BuildProfile | None] = (),
        on_build_end: Callable[[bool], None] | None = None,
    ):
        self.host = host
        self.profiles = list(profiles)
        self.supported_build_targets: set[str] | None = None
        self.current_product_name: str | None = None
        self.on_build_end = on_build_end

    def refresh_supported_platforms(self):
        self.supported_build_targets = set(self.host.supported_build_targets())
        return self.supported_build_targets

    @property
    def enabled_profiles(self):
        return remove_null_profiles(self.profiles)

    def build_prompt(self):
        return get_build_prompt(len(self.enabled_profiles))

    def is_supported(self, profile: BuildProfile):
        if self.supported_build_targets is None:
            return False
        return (
            get_platform_info(profile.target).build_target
            in self.supported_build_targets
        )

    def run_build_sequence(
        self, profiles: Iterable[BuildProfile | None] | None = None
    ):
        finished_with_success = True
        try:
            if self.supported_build_targets is None:
                self.refresh_supported_platforms()
            own_profiles = profiles is None
            profiles = remove_unsupported_profiles(
                remove_null_profiles(self.profiles if own_profiles else profiles),
                self.supported_build_targets,
            )
            if own_profiles:
                self.profiles = profiles

            BuildStep.start.emit(BUILD_ALL_STEP)
            original_state = self.host.get_build_state()
            self.current_product_name = original_state.product_name
            try:
                for i, profile in enumerate(profiles):
                    BuildStep.progress.emit(i + 1, len(profiles))
                    if not self.build_profile(profile, original_state):
                        finished_with_success = False
                        break
            except BuildProcessError as e:
                finished_with_success = False
                BuildStep.error.emit(str(e))
            finally:
                self.restore_build_state(original_state)
        except BuildProcessError as e:
            finished_with_success = False
            BuildStep.error.emit(str(e))

        status = (
            ProgressStatus.succeeded if finished_with_success else ProgressStatus.failed
        )
        BuildStep.end.emit(BUILD_ALL_STEP, status)
        if self.on_build_end:
            self.on_build_end(finished_with_success)
        return finished_with_success

    def build_profile(self, profile: BuildProfile, original_state: BuildState):
        step_name = f"Build {profile.name}"
        BuildStep.start.emit(step_name)
        try:
            succeeded = self.build_individual_target(profile, original_state)
        except BuildProcessError:
            BuildStep.end.emit(step_name, ProgressStatus.failed)
            raise
        BuildStep.end.emit(
            step_name, ProgressStatus.succeeded if succeeded else ProgressStatus.failed
        )
        return succeeded

    def build_individual_target(
        self, profile: BuildProfile, original_state: BuildState
    ):
        """An empty product name override builds with the product name captured
        before the sequence, not with the one left by a previous profile."""
        platform = get_platform_info(profile.target)
        subtarget = None
        subtarget_log = "default"
        if platform.target_group == STANDALONE_GROUP:
            subtarget = profile.subtarget
            subtarget_log = subtarget.value
            self.host.set_standalone_subtarget(subtarget)

        product_name = profile.product_name or original_state.product_name
        if product_name != self.current_product_name:
            self.host.set_product_name(product_name)
            self.current_product_name = product_name

        location_path = str(get_location_path(profile, product_name))
        if self.host.can_append(platform.build_target, location_path):
            build_option = BuildOption.accept_external_modifications
        else:
            build_option = BuildOption.none

        options = BuildPlayerOptions(
            target=platform.build_target,
            target_group=platform.target_group,
            subtarget=subtarget,
            scenes=list(profile.scenes),
            location_path=location_path,
            options=build_option,
        )
        BuildStep.message.emit(
            f"Making build with options: target is {options.target}; "
            f"subtarget is {subtarget_log}; "
            f"targetGroup is {options.target_group}"
        )

        report = self.host.build_player(options)
        if report.succeeded:
            BuildStep.message.emit(
                f"Build for {options.target} completed in "
                f"{format_seconds(report.total_seconds)} seconds"
            )
            return True

        BuildStep.error.emit(f"Build for {options.target} failed")
        return False

    def restore_build_state(self, original_state: BuildState):
        try:
            current_state = self.host.get_build_state()
            if current_state.active_build_target != original_state.active_build_target:
                self.host.switch_active_build_target(
                    original_state.target_group,
                    original_state.active_build_target,
                    original_state.standalone_subtarget,
                )
            elif (
                original_state.standalone_subtarget is not None
                and current_state.standalone_subtarget
                != original_state.standalone_subtarget
            ):
                self.host.set_standalone_subtarget(original_state.standalone_subtarget)
        finally:
            self.host.set_product_name(original_state.product_name)
