from enum import Enum
from pathlib import Path
from typing import Annotated

import msgspec
from msgspec import Struct

from multi_build.utils import get_app_dir

CONFIG_PATH = Path(get_app_dir("MultiBuild")) / "config.yaml"

NonEmptyString = Annotated[str, msgspec.Meta(min_length=1)]


class Base(Struct, kw_only=True):
    ...


class TargetPlatform(str, Enum):
    windows64 = "Windows64"
    linux64 = "Linux64"
    osx = "OSX"
    android = "Android"


class StandaloneBuildSubtarget(str, Enum):
    player = "Player"
    server = "Server"


class BuildProfile(Base):
    name: NonEmptyString
    target: TargetPlatform
    subtarget: StandaloneBuildSubtarget = StandaloneBuildSubtarget.player
    scenes: list[str] = []
    product_name: str = ""
    build_path: str = ""


class Config(Base):
    project_path: str = "."
    editor_path: str | None = None
    profiles: list[BuildProfile | None] = []

    @classmethod
    def load(cls, path: Path = CONFIG_PATH):
        path = Path(path)
        if not path.exists():
            path.parent.mkdir(exist_ok=True, parents=True)
            path.touch()
        with open(
            path,
            "rb",
        ) as file:
            config = file.read()
            if not config.strip():
                return cls()
            return msgspec.yaml.decode(config, type=cls)

    @classmethod
    def loads(cls, config_str: str):
        return msgspec.yaml.decode(config_str, type=cls)

    def save(self, path: Path = CONFIG_PATH):
        with open(
            path,
            "wb",
        ) as file:
            yaml_config = msgspec.yaml.encode(self)
            file.write(yaml_config)

    def get_profile(self, name: str):
        for profile in self.profiles:
            if profile is not None and profile.name == name:
                return profile
