import sys
from pathlib import Path

from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from multi_build.config import CONFIG_PATH, BuildProfile, Config
from multi_build.gui.build_dialog import BuildDialog
from multi_build.gui.build_thread import SupportedPlatformsThread
from multi_build.gui.profile_dialogs import AddProfileDialog, EditProfileDialog
from multi_build.orchestrator import get_build_prompt, remove_null_profiles
from multi_build.platforms import get_platform_info
from multi_build.unity_host import validate_unity_project

EMPTY_SLOT_TEXT = "None (Build Profile)"


class MainWindow(QWidget):
    def __init__(self, config_path: Path = CONFIG_PATH):
        super().__init__()
        self.setWindowTitle("Multi Build")
        self.setMinimumWidth(450)

        self.config_path = config_path
        self.config = Config.load(config_path)
        self.supported_build_targets: set[str] | None = None

        project_path_layout = QHBoxLayout()
        self.project_path_textbox = QLineEdit()
        self.project_path_textbox.setPlaceholderText("Select Unity project...")
        self.project_path_textbox.setReadOnly(True)
        choose_button = QPushButton("Choose...")
        choose_button.clicked.connect(self.select_project_path)
        project_path_layout.addWidget(self.project_path_textbox)
        project_path_layout.addWidget(choose_button)

        self.platforms_label = QLabel()

        self.profiles_list = QListWidget()
        self.profiles_list.itemDoubleClicked.connect(
            lambda item: self.open_edit_profile_dialog()
        )

        self.add_profile_button = QPushButton("Add...")
        self.add_profile_button.pressed.connect(self.open_new_profile_dialog)
        self.add_slot_button = QPushButton("Add empty")
        self.add_slot_button.pressed.connect(self.add_empty_slot)
        self.edit_profile_button = QPushButton("Edit...")
        self.edit_profile_button.pressed.connect(self.open_edit_profile_dialog)
        self.remove_profile_button = QPushButton("Remove")
        self.remove_profile_button.pressed.connect(self.remove_profile)
        profiles_buttons_layout = QHBoxLayout()
        profiles_buttons_layout.addWidget(self.add_profile_button)
        profiles_buttons_layout.addWidget(self.add_slot_button)
        profiles_buttons_layout.addWidget(self.edit_profile_button)
        profiles_buttons_layout.addWidget(self.remove_profile_button)

        self.build_button = QPushButton()
        self.build_button.pressed.connect(self.start_build_process)

        layout = QVBoxLayout()
        layout.addLayout(project_path_layout)
        layout.addWidget(self.platforms_label)
        layout.addWidget(self.profiles_list)
        layout.addLayout(profiles_buttons_layout)
        layout.addWidget(self.build_button)
        self.setLayout(layout)

        self.supported_platforms_thread = SupportedPlatformsThread(self)
        self.supported_platforms_thread.finished.connect(
            lambda: self.build_button.setEnabled(True)
        )

        self.update_from_config()
        self.refresh_supported_platforms()

    def profile_text(self, profile: BuildProfile | None):
        if profile is None:
            return EMPTY_SLOT_TEXT
        build_target = get_platform_info(profile.target).build_target
        text = f"{profile.name} ({profile.target.value})"
        if (
            self.supported_build_targets is not None
            and build_target not in self.supported_build_targets
        ):
            text += " - unsupported"
        return text

    def update_from_config(self):
        self.project_path_textbox.setText(self.config.project_path)

        current_row = self.profiles_list.currentRow()
        self.profiles_list.clear()
        self.profiles_list.addItems(
            [self.profile_text(profile) for profile in self.config.profiles]
        )
        if self.config.profiles:
            self.profiles_list.setCurrentRow(
                min(max(current_row, 0), len(self.config.profiles) - 1)
            )

        profiles_empty = len(self.config.profiles) == 0
        self.edit_profile_button.setEnabled(not profiles_empty)
        self.remove_profile_button.setEnabled(not profiles_empty)

        build_prompt = get_build_prompt(len(remove_null_profiles(self.config.profiles)))
        self.build_button.setVisible(build_prompt is not None)
        if build_prompt is not None:
            self.build_button.setText(build_prompt)

    def refresh_supported_platforms(self):
        if not validate_unity_project(Path(self.config.project_path)):
            self.platforms_label.setText("Not a valid Unity project")
            return
        if self.supported_platforms_thread.isRunning():
            return
        self.platforms_label.setText("Gathering available build targets...")
        self.build_button.setEnabled(False)
        self.supported_platforms_thread.configure(self.config)
        self.supported_platforms_thread.start()

    def on_supported_build_targets(self, supported_build_targets: list[str]):
        self.supported_build_targets = set(supported_build_targets)
        self.platforms_label.setText(
            f"{len(self.supported_build_targets)} build targets available"
        )
        self.update_from_config()

    def on_supported_build_targets_error(self, error_message: str):
        self.platforms_label.setText(error_message)

    def select_project_path(self):
        project_path = QFileDialog.getExistingDirectory(self, "Select project path")
        if project_path == "":
            return
        if not validate_unity_project(Path(project_path)):
            QMessageBox.warning(
                self, "Project path", f"{project_path} is not a valid Unity project"
            )
            return
        self.config.project_path = project_path
        self.config.save(self.config_path)
        self.supported_build_targets = None
        self.update_from_config()
        self.refresh_supported_platforms()

    def start_build_process(self):
        if self.supported_platforms_thread.isRunning():
            return
        build_dialog = BuildDialog(self)
        build_dialog.start_build_process(self.config, self.supported_build_targets)
        build_dialog.exec()

    def open_new_profile_dialog(self):
        AddProfileDialog(self).exec()

    def open_edit_profile_dialog(self):
        profile_index = self.profiles_list.currentRow()
        if profile_index < 0:
            return
        EditProfileDialog(
            self, profile_index, self.config.profiles[profile_index]
        ).exec()

    def add_profile(self, profile: BuildProfile):
        self.config.profiles.append(profile)
        self.config.save(self.config_path)
        self.update_from_config()
        self.profiles_list.setCurrentRow(len(self.config.profiles) - 1)

    def add_empty_slot(self):
        self.config.profiles.append(None)
        self.config.save(self.config_path)
        self.update_from_config()

    def update_profile(self, profile_index: int, profile: BuildProfile):
        self.config.profiles[profile_index] = profile
        self.config.save(self.config_path)
        self.update_from_config()
        self.profiles_list.setCurrentRow(profile_index)

    def remove_profile(self):
        profile_index = self.profiles_list.currentRow()
        if profile_index < 0:
            return
        profile_to_remove = self.config.profiles[profile_index]
        if profile_to_remove is not None:
            reply = QMessageBox.question(
                self,
                "Remove build profile",
                f"Do you really want to remove {profile_to_remove.name}?",
                QMessageBox.Yes | QMessageBox.No,
            )
            if reply != QMessageBox.Yes:
                return
        del self.config.profiles[profile_index]
        self.config.save(self.config_path)
        self.update_from_config()

    def closeEvent(self, event: QCloseEvent):
        self.supported_platforms_thread.wait()
        self.config.save(self.config_path)


def show_gui(config_path: Path = CONFIG_PATH):
    app = QApplication(sys.argv)
    window = MainWindow(config_path)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    show_gui()
