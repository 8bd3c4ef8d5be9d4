import platform
import shutil
import tempfile
import threading
import uuid
from pathlib import Path

import msgspec
import yaml
from msgspec import Struct

from multi_build.build_step import BuildStep
from multi_build.command import Command
from multi_build.config import StandaloneBuildSubtarget
from multi_build.exceptions import BuildProcessError
from multi_build.host import (
    BuildHost,
    BuildPlayerOptions,
    BuildReport,
    BuildResult,
    BuildState,
)
from multi_build.utils import OperatingSystem

TEMP_DIR_PREFIX = f"MultiBuild_{uuid.getnode()}_"

BRIDGE_DIRECTORY = Path("Assets") / "Editor" / "MultiBuild"
BRIDGE_FILE_NAME = "MultiBuildBridge.cs"
BRIDGE_CLASS = "MultiBuild.MultiBuildBridge"

ABORT_MESSAGE = "Aborting batchmode due to failure:"

# Unity opens a project in one editor at a time
open_projects: set[Path] = set()
open_projects_lock = threading.Lock()


def validate_unity_project(project_path: Path):
    return (project_path / "ProjectSettings" / "ProjectVersion.txt").is_file() and (
        project_path / "Assets"
    ).is_dir()


def get_editor_version(project_path: Path):
    with open(
        Path(project_path) / "ProjectSettings" / "ProjectVersion.txt",
        encoding="utf-8",
    ) as f:
        project_version_yaml = yaml.safe_load(f.read())
    return project_version_yaml["m_EditorVersion"]


def get_editor_path(editor_version: str):
    if OperatingSystem.current() == OperatingSystem.windows:
        return f"C:\\Program Files\\Unity\\Hub\\Editor\\{editor_version}\\Editor\\Unity.exe"
    elif OperatingSystem.current() == OperatingSystem.macos:
        return f"/Applications/Unity/Hub/Editor/{editor_version}/Unity.app/Contents/MacOS/Unity"
    elif OperatingSystem.current() == OperatingSystem.linux:
        return str(
            Path.home()
            / "Unity"
            / "Hub"
            / "Editor"
            / editor_version
            / "Editor"
            / "Unity"
        )
    else:
        raise BuildProcessError(f"Platform {platform.system()} not supported")


BRIDGE_SCRIPT = """
using System;
using System.IO;
using System.Linq;
using UnityEditor;
using UnityEditor.Build.Reporting;
using UnityEngine;

namespace MultiBuild
{
    [Serializable]
    public class BridgeRequest
    {
        public string target = "";
        public string targetGroup = "";
        public string subtarget = "";
        public string[] scenes = new string[0];
        public string locationPath = "";
        public string options = "None";
        public string productName = "";
    }

    [Serializable]
    public class BridgeResponse
    {
        public string error = "";
        public string activeBuildTarget = "";
        public string targetGroup = "";
        public string standaloneSubtarget = "";
        public string productName = "";
        public string[] supportedBuildTargets = new string[0];
        public bool canAppend;
        public string buildResult = "";
        public double totalSeconds;
    }

    public static class MultiBuildBridge
    {
        private static string GetArg(string name)
        {
            var args = Environment.GetCommandLineArgs();
            for (int i = 0; i < args.Length; i++)
            {
                if (args[i] == name && args.Length > i + 1)
                {
                    return args[i + 1];
                }
            }
            throw new ArgumentException($"Missing argument {name}");
        }

        private static T Parse<T>(string value)
        {
            return (T)Enum.Parse(typeof(T), value);
        }

        private static void Run(Action<BridgeRequest, BridgeResponse> action)
        {
            var request = JsonUtility.FromJson<BridgeRequest>(
                File.ReadAllText(GetArg("-multiBuildRequest")));
            var response = new BridgeResponse();
            try
            {
                action(request, response);
            }
            catch (Exception e)
            {
                response.error = e.Message;
            }
            File.WriteAllText(GetArg("-multiBuildResponse"), JsonUtility.ToJson(response));
        }

        public static void SupportedBuildTargets()
        {
            Run((request, response) =>
            {
                response.supportedBuildTargets = Enum.GetValues(typeof(BuildTarget))
                    .Cast<BuildTarget>()
                    .Where(target => BuildPipeline.IsBuildTargetSupported(
                        BuildPipeline.GetBuildTargetGroup(target), target))
                    .Select(target => target.ToString())
                    .Distinct()
                    .ToArray();
            });
        }

        public static void ReadBuildState()
        {
            Run((request, response) =>
            {
                var targetGroup = EditorUserBuildSettings.selectedBuildTargetGroup;
                response.activeBuildTarget = EditorUserBuildSettings.activeBuildTarget.ToString();
                response.targetGroup = targetGroup.ToString();
                if (targetGroup == BuildTargetGroup.Standalone)
                {
                    response.standaloneSubtarget = EditorUserBuildSettings.standaloneBuildSubtarget.ToString();
                }
                response.productName = PlayerSettings.productName;
            });
        }

        public static void SetProductName()
        {
            Run((request, response) =>
            {
                PlayerSettings.productName = request.productName;
                AssetDatabase.SaveAssets();
                response.productName = PlayerSettings.productName;
            });
        }

        public static void SetStandaloneSubtarget()
        {
            Run((request, response) =>
            {
                EditorUserBuildSettings.standaloneBuildSubtarget = Parse<StandaloneBuildSubtarget>(request.subtarget);
                response.standaloneSubtarget = EditorUserBuildSettings.standaloneBuildSubtarget.ToString();
            });
        }

        public static void SwitchActiveBuildTarget()
        {
            Run((request, response) =>
            {
                var targetGroup = Parse<BuildTargetGroup>(request.targetGroup);
                if (targetGroup == BuildTargetGroup.Standalone && !string.IsNullOrEmpty(request.subtarget))
                {
                    EditorUserBuildSettings.standaloneBuildSubtarget = Parse<StandaloneBuildSubtarget>(request.subtarget);
                }
                if (!EditorUserBuildSettings.SwitchActiveBuildTarget(targetGroup, Parse<BuildTarget>(request.target)))
                {
                    response.error = $"Cannot switch active build target to {request.target}";
                }
                response.activeBuildTarget = EditorUserBuildSettings.activeBuildTarget.ToString();
            });
        }

        public static void CanAppend()
        {
            Run((request, response) =>
            {
                response.canAppend = BuildPipeline.BuildCanBeAppended(
                    Parse<BuildTarget>(request.target), request.locationPath) == CanAppendBuild.Yes;
            });
        }

        public static void Build()
        {
            Run((request, response) =>
            {
                var scenes = request.scenes.Length > 0
                    ? request.scenes
                    : EditorBuildSettings.scenes
                        .Where(scene => scene.enabled)
                        .Select(scene => scene.path)
                        .ToArray();
                var options = new BuildPlayerOptions()
                {
                    scenes = scenes,
                    locationPathName = request.locationPath,
                    target = Parse<BuildTarget>(request.target),
                    targetGroup = Parse<BuildTargetGroup>(request.targetGroup),
                    options = Parse<BuildOptions>(request.options),
                };
                if (!string.IsNullOrEmpty(request.subtarget))
                {
                    options.subtarget = (int)Parse<StandaloneBuildSubtarget>(request.subtarget);
                }
                var report = BuildPipeline.BuildPlayer(options);
                response.buildResult = report.summary.result.ToString();
                response.totalSeconds = report.summary.totalTime.TotalSeconds;
            });
        }
    }
}
"""


def get_subtarget(value: str):
    try:
        return StandaloneBuildSubtarget(value)
    except ValueError:
        return None


class BridgeRequest(Struct, kw_only=True, rename="camel"):
    target: str = ""
    target_group: str = ""
    subtarget: str = ""
    scenes: list[str] = []
    location_path: str = ""
    options: str = "None"
    product_name: str = ""


class BridgeResponse(Struct, kw_only=True, rename="camel"):
    error: str = ""
    active_build_target: str = ""
    target_group: str = ""
    standalone_subtarget: str = ""
    product_name: str = ""
    supported_build_targets: list[str] = []
    can_append: bool = False
    build_result: str = ""
    total_seconds: float = 0.0


class UnityHost(BuildHost, BuildStep):
    """Runs the player build pipeline of a Unity project through the editor in
    batch mode.

    Each call starts a new editor process that executes one method of the
    bridge script, so settings changed by a call are persisted by the editor
    before the call returns. Use it as a context manager so the bridge script
    is installed in the project only for the duration of a run.
    """

    def __init__(self, project_path: Path, editor_path: str | None = None):
        self.project_path = Path(project_path)
        if not validate_unity_project(self.project_path):
            raise BuildProcessError(f"{self.project_path} is not a valid Unity project")
        if editor_path is None:
            editor_path = get_editor_path(get_editor_version(self.project_path))
        self.editor_path = editor_path

    def __enter__(self):
        with open_projects_lock:
            if self.project_path.resolve() in open_projects:
                raise BuildProcessError(
                    f"{self.project_path} is already in use by another build process"
                )
            open_projects.add(self.project_path.resolve())
        try:
            self.install_bridge()
        except OSError:
            self.release_project()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        try:
            self.remove_bridge()
        finally:
            self.release_project()

    def release_project(self):
        with open_projects_lock:
            open_projects.discard(self.project_path.resolve())

    @property
    def bridge_directory(self):
        return self.project_path / BRIDGE_DIRECTORY

    def install_bridge(self):
        self.bridge_directory.mkdir(exist_ok=True, parents=True)
        with open(self.bridge_directory / BRIDGE_FILE_NAME, "w", encoding="utf-8") as f:
            f.write(BRIDGE_SCRIPT)

    def remove_bridge(self):
        if self.bridge_directory.exists():
            shutil.rmtree(self.bridge_directory)
        bridge_directory_meta = self.bridge_directory.with_name(
            self.bridge_directory.name + ".meta"
        )
        bridge_directory_meta.unlink(missing_ok=True)

    def get_command(self, method: str, request_path: Path, response_path: Path):
        return [
            self.editor_path,
            "-quit",
            "-batchmode",
            "-projectPath",
            str(self.project_path),
            "-logFile",
            "-",
            "-executeMethod",
            f"{BRIDGE_CLASS}.{method}",
            "-multiBuildRequest",
            str(request_path),
            "-multiBuildResponse",
            str(response_path),
        ]

    def execute(self, method: str, request: BridgeRequest | None = None):
        with tempfile.TemporaryDirectory(
            prefix=TEMP_DIR_PREFIX, ignore_cleanup_errors=True
        ) as temp_dir:
            request_path = Path(temp_dir) / "request.json"
            response_path = Path(temp_dir) / "response.json"
            request_path.write_bytes(msgspec.json.encode(request or BridgeRequest()))

            command = Command(self.get_command(method, request_path, response_path))
            try:
                command.start()
            except FileNotFoundError:
                raise BuildProcessError(
                    f"Cannot find Unity editor at '{self.editor_path}'"
                )

            error_message = ""
            inside_error_message = False
            for line in command.output_lines:
                if inside_error_message:
                    if line == "":
                        inside_error_message = False
                    else:
                        error_message += line + "\n"
                if line == ABORT_MESSAGE:
                    inside_error_message = True
                self.long_message.emit(line)

            return_value = command.return_value
            if return_value != 0:
                raise BuildProcessError(
                    f"Unity editor error ({return_value}) running {method}\n"
                    f"{error_message}".strip()
                )
            if not response_path.exists():
                raise BuildProcessError(f"Unity editor gave no response to {method}")
            try:
                response = msgspec.json.decode(
                    response_path.read_bytes(), type=BridgeResponse
                )
            except msgspec.DecodeError as e:
                raise BuildProcessError(
                    f"Invalid response from Unity editor to {method}: {e}"
                )

        if response.error:
            raise BuildProcessError(response.error)
        return response

    def supported_build_targets(self):
        self.short_message.emit("Gathering available build targets...")
        return set(self.execute("SupportedBuildTargets").supported_build_targets)

    def get_build_state(self):
        response = self.execute("ReadBuildState")
        return BuildState(
            active_build_target=response.active_build_target,
            target_group=response.target_group,
            standalone_subtarget=get_subtarget(response.standalone_subtarget),
            product_name=response.product_name,
        )

    def set_product_name(self, product_name):
        self.execute("SetProductName", BridgeRequest(product_name=product_name))

    def set_standalone_subtarget(self, subtarget):
        self.execute(
            "SetStandaloneSubtarget",
            BridgeRequest(subtarget=StandaloneBuildSubtarget(subtarget).value),
        )

    def switch_active_build_target(self, target_group, build_target, subtarget=None):
        self.short_message.emit(f"Switching active build target to {build_target}...")
        self.execute(
            "SwitchActiveBuildTarget",
            BridgeRequest(
                target=build_target,
                target_group=target_group,
                subtarget=subtarget.value if subtarget else "",
            ),
        )

    def can_append(self, build_target, location_path):
        return self.execute(
            "CanAppend",
            BridgeRequest(target=build_target, location_path=str(location_path)),
        ).can_append

    def build_player(self, options: BuildPlayerOptions):
        self.short_message.emit(f"Building {options.target} player...")
        response = self.execute(
            "Build",
            BridgeRequest(
                target=options.target,
                target_group=options.target_group,
                subtarget=options.subtarget.value if options.subtarget else "",
                scenes=list(options.scenes),
                location_path=options.location_path,
                options=options.options.value,
            ),
        )
        try:
            result = BuildResult(response.build_result)
        except ValueError:
            result = BuildResult.unknown
        return BuildReport(result=result, total_seconds=response.total_seconds)
