from PySide6.QtCore import QObject, QThread, Signal

from multi_build.build_step import BuildStep
from multi_build.config import Config
from multi_build.exceptions import BuildProcessError
from multi_build.orchestrator import BuildOrchestrator
from multi_build.unity_host import UnityHost


class BuildSignals(QObject):
    build_step = Signal(str)
    build_step_end = Signal(str, str)
    build_count = Signal(int, int)
    build_short_progress = Signal(str)
    build_progress = Signal(str)
    build_warning = Signal(str)
    build_error = Signal(str)
    build_end = Signal(bool)


class BuildThread(QThread):
    """Runs the build sequence away from the UI thread, posting every progress
    event back through Qt signals."""

    def __init__(self, parent=None):
        QThread.__init__(self, parent)
        self.signals = BuildSignals()
        self.signals.build_step.connect(parent.on_build_step)
        self.signals.build_step_end.connect(parent.on_build_step_end)
        self.signals.build_count.connect(parent.on_build_count)
        self.signals.build_short_progress.connect(parent.on_build_short_progress)
        self.signals.build_progress.connect(parent.on_build_progress)
        self.signals.build_warning.connect(parent.on_build_warning)
        self.signals.build_error.connect(parent.on_build_error)
        self.signals.build_end.connect(parent.on_build_end)
        self.config = None
        self.supported_build_targets = None

        BuildStep.start.set(self.signals.build_step.emit)
        BuildStep.end.set(self.emit_build_step_end)
        BuildStep.progress.set(self.signals.build_count.emit)
        BuildStep.short_message.set(self.signals.build_short_progress.emit)
        BuildStep.long_message.set(self.signals.build_progress.emit)
        BuildStep.warning.set(self.signals.build_warning.emit)
        BuildStep.error.set(self.signals.build_error.emit)

    def emit_build_step_end(self, name, status):
        self.signals.build_step_end.emit(name, status.value)

    def configure(self, config: Config, supported_build_targets: set[str] | None):
        self.config = config
        self.supported_build_targets = supported_build_targets

    def run(self):
        try:
            with UnityHost(self.config.project_path, self.config.editor_path) as host:
                orchestrator = BuildOrchestrator(
                    host,
                    self.config.profiles,
                    on_build_end=self.signals.build_end.emit,
                )
                orchestrator.supported_build_targets = self.supported_build_targets
                orchestrator.run_build_sequence()
        except BuildProcessError as e:
            self.signals.build_error.emit(str(e))
            self.signals.build_end.emit(False)


class SupportedPlatformsSignals(QObject):
    supported_build_targets = Signal(list)
    error = Signal(str)


class SupportedPlatformsThread(QThread):
    def __init__(self, parent=None):
        QThread.__init__(self, parent)
        self.signals = SupportedPlatformsSignals()
        self.signals.supported_build_targets.connect(
            parent.on_supported_build_targets
        )
        self.signals.error.connect(parent.on_supported_build_targets_error)
        self.config = None

    def configure(self, config: Config):
        self.config = config

    def run(self):
        try:
            with UnityHost(self.config.project_path, self.config.editor_path) as host:
                self.signals.supported_build_targets.emit(
                    sorted(host.supported_build_targets())
                )
        except BuildProcessError as e:
            self.signals.error.emit(str(e))
