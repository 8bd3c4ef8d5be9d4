from PySide6.QtCore import Slot
from PySide6.QtGui import QCloseEvent, QFont
from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QHBoxLayout,
    QLabel,
    QProgressBar,
    QPushButton,
    QSizePolicy,
    QTextEdit,
    QVBoxLayout,
)

from multi_build.build_step import ProgressStatus
from multi_build.config import Config
from multi_build.gui.build_thread import BuildThread
from multi_build.utils import OperatingSystem

RED_COLOR = "#ef4e40"
YELLOW_COLOR = "#e0a526"
GREEN_COLOR = "#3fa34d"

MAX_MESSAGE_LENGTH = 120


class BuildDialog(QDialog):
    def __init__(self, parent):
        super().__init__(parent)
        self.setWindowTitle("Build")
        self.resize(600, 300)

        self.progress_bar = QProgressBar()
        self.progress_bar.setValue(0)
        self.progress_bar.setFormat("%v/%m")

        self.build_step_label = QLabel("Build in progress")
        self.build_step_label.setStyleSheet("font-weight: bold;")
        self.build_message_label = QLabel()
        self.build_message_label.setSizePolicy(
            QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Preferred
        )
        labels_layout = QHBoxLayout()
        labels_layout.addWidget(self.build_step_label, stretch=0)
        labels_layout.addWidget(self.build_message_label, stretch=1)

        self.output_text_area = QTextEdit()
        self.output_text_area.setReadOnly(True)
        self.output_text_area.setFont(QFont(OperatingSystem.monospace_font()))

        self.button_box = QDialogButtonBox()
        self.close_button = QPushButton("Close")
        self.close_button.setEnabled(False)
        self.button_box.addButton(
            self.close_button, QDialogButtonBox.ButtonRole.RejectRole
        )
        self.button_box.rejected.connect(self.close)

        layout = QVBoxLayout()
        layout.addWidget(self.progress_bar)
        layout.addLayout(labels_layout)
        layout.addWidget(self.output_text_area)
        layout.addWidget(self.button_box)

        self.setLayout(layout)

        self.thread = BuildThread(self)
        self.thread.started.connect(self.on_build_start)
        self.thread.finished.connect(self.on_thread_end)

    def append_output_text(
        self,
        text: str,
        bold: bool = False,
        color: str | None = None,
        add_space_before: bool = False,
    ):
        text = text.replace("\n", "<br />")
        if bold:
            text = f"<b>{text}</b>"
        if color:
            text = f"<span style='color: {color};'>{text}</span>"
        if add_space_before:
            text = f"<br />{text}"
        self.output_text_area.append(text)

    def start_build_process(
        self, config: Config, supported_build_targets: set[str] | None
    ):
        self.thread.configure(config, supported_build_targets)
        self.thread.start()

    def on_build_start(self):
        self.output_text_area.clear()
        self.progress_bar.setMinimum(0)
        self.progress_bar.setMaximum(0)

    def on_thread_end(self):
        self.close_button.setEnabled(True)

    @Slot(bool)
    def on_build_end(self, finished_with_success: bool):
        if finished_with_success:
            self.progress_bar.setValue(self.progress_bar.maximum())
            self.build_step_label.setText("Finished successfully!")
            self.build_message_label.setText("")
        else:
            self.build_step_label.setText("Build failed")

    def update_build_message_label_text(self, text: str):
        text = " ".join(text.strip().split())
        if len(text) > MAX_MESSAGE_LENGTH:
            text = text[: MAX_MESSAGE_LENGTH - 1] + "…"
        self.build_message_label.setText(text)

    @Slot(str)
    def on_build_step(self, build_step_name: str):
        self.build_step_label.setText(build_step_name)
        self.append_output_text(
            f"// {build_step_name}",
            bold=True,
            add_space_before=self.output_text_area.toPlainText() != "",
        )

    @Slot(str, str)
    def on_build_step_end(self, build_step_name: str, status: str):
        color = GREEN_COLOR if status == ProgressStatus.succeeded.value else RED_COLOR
        self.append_output_text(
            f"// {build_step_name}: {status}", bold=True, color=color
        )

    @Slot(int, int)
    def on_build_count(self, current: int, total: int):
        self.progress_bar.setMaximum(total)
        self.progress_bar.setValue(current - 1)

    @Slot(str)
    def on_build_short_progress(self, short_message: str):
        self.update_build_message_label_text(short_message)

    @Slot(str)
    def on_build_progress(self, message: str):
        self.append_output_text(message)

    @Slot(str)
    def on_build_warning(self, warning_message: str):
        self.append_output_text(warning_message, color=YELLOW_COLOR)

    @Slot(str)
    def on_build_error(self, error_message: str):
        self.append_output_text(error_message, color=RED_COLOR)
        self.update_build_message_label_text(error_message)
        self.build_message_label.setStyleSheet(f"color: {RED_COLOR};")

    def closeEvent(self, event: QCloseEvent):
        if self.thread.isRunning():
            # builds cannot be cancelled once started
            self.update_build_message_label_text(
                "Please wait for the build sequence to end..."
            )
            event.ignore()
            return
        event.accept()

    def reject(self):
        if self.thread.isRunning():
            return
        super().reject()
