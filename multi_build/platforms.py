from pathlib import Path

from msgspec import Struct

from multi_build.config import BuildProfile, TargetPlatform

DEFAULT_BUILDS_DIRECTORY = "Builds"


class PlatformInfo(Struct, frozen=True):
    build_target: str
    target_group: str
    extension: str
    has_subtarget: bool


STANDALONE_GROUP = "Standalone"

PLATFORMS = {
    TargetPlatform.windows64: PlatformInfo(
        build_target="StandaloneWindows64",
        target_group=STANDALONE_GROUP,
        extension=".exe",
        has_subtarget=True,
    ),
    TargetPlatform.linux64: PlatformInfo(
        build_target="StandaloneLinux64",
        target_group=STANDALONE_GROUP,
        extension=".x86_64",
        has_subtarget=True,
    ),
    TargetPlatform.osx: PlatformInfo(
        build_target="StandaloneOSX",
        target_group=STANDALONE_GROUP,
        extension="",
        has_subtarget=True,
    ),
    TargetPlatform.android: PlatformInfo(
        build_target="Android",
        target_group="Android",
        extension=".apk",
        has_subtarget=False,
    ),
}


def get_platform_info(platform: TargetPlatform) -> PlatformInfo:
    return PLATFORMS[TargetPlatform(platform)]


def get_file_name(product_name: str, platform: TargetPlatform) -> str:
    return product_name + get_platform_info(platform).extension


def get_location_path(profile: BuildProfile, product_name: str) -> Path:
    """Returns where the player for `profile` is written, relative to the project
    unless the profile overrides it with an absolute path."""
    file_name = get_file_name(product_name, profile.target)
    if profile.build_path:
        return Path(profile.build_path) / file_name
    return (
        Path(DEFAULT_BUILDS_DIRECTORY)
        / get_platform_info(profile.target).build_target
        / file_name
    )
