import msgspec
from PySide6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
)

from multi_build.config import (
    BuildProfile,
    StandaloneBuildSubtarget,
    TargetPlatform,
)
from multi_build.platforms import get_platform_info


class ManageProfileDialog(QDialog):
    def __init__(self, parent, window_title: str, accept_button_text: str):
        super().__init__(parent)
        self.setWindowTitle(window_title)
        self.setMinimumWidth(400)

        main_form = QFormLayout()
        self.profile_name_textbox = QLineEdit()
        main_form.addRow(QLabel("Profile name:"), self.profile_name_textbox)

        self.targets = [target for target in TargetPlatform]
        self.target_combobox = QComboBox()
        self.target_combobox.addItems([target.value for target in self.targets])
        self.target_combobox.currentIndexChanged.connect(self.on_target_change)
        main_form.addRow(QLabel("Target platform:"), self.target_combobox)

        self.subtargets = [subtarget for subtarget in StandaloneBuildSubtarget]
        self.subtarget_combobox = QComboBox()
        self.subtarget_combobox.addItems(
            [subtarget.value for subtarget in self.subtargets]
        )
        main_form.addRow(QLabel("Standalone subtarget:"), self.subtarget_combobox)

        self.product_name_textbox = QLineEdit()
        self.product_name_textbox.setPlaceholderText("Project product name")
        main_form.addRow(QLabel("Product name:"), self.product_name_textbox)

        build_path_layout = QHBoxLayout()
        self.build_path_textbox = QLineEdit()
        self.build_path_textbox.setPlaceholderText("Builds/<target>")
        choose_button = QPushButton("Choose...")
        choose_button.clicked.connect(self.select_build_path)
        build_path_layout.addWidget(self.build_path_textbox)
        build_path_layout.addWidget(choose_button)
        main_form.addRow(QLabel("Build path:"), build_path_layout)

        self.scenes_textbox = QPlainTextEdit()
        self.scenes_textbox.setPlaceholderText(
            "Assets/Scenes/Boot.unity\n(one scene per line, first one is loaded at startup;"
            " leave empty to use the project build settings)"
        )
        main_form.addRow(QLabel("Scenes:"), self.scenes_textbox)

        self.button_box = QDialogButtonBox()
        self.button_box.addButton(
            accept_button_text, QDialogButtonBox.ButtonRole.AcceptRole
        )
        self.button_box.addButton("Cancel", QDialogButtonBox.ButtonRole.RejectRole)
        self.button_box.rejected.connect(self.close)

        layout = QVBoxLayout()
        layout.addLayout(main_form)
        layout.addWidget(self.button_box)
        self.setLayout(layout)

        self.on_target_change()

    @property
    def selected_target(self):
        return self.targets[self.target_combobox.currentIndex()]

    def on_target_change(self):
        self.subtarget_combobox.setEnabled(
            get_platform_info(self.selected_target).has_subtarget
        )

    def select_build_path(self):
        build_path = QFileDialog.getExistingDirectory(self, "Select build path")
        if build_path == "":
            return
        self.build_path_textbox.setText(build_path)

    def show_validation_error(self, message: str):
        messagebox = QMessageBox()
        messagebox.setWindowTitle("Validation error")
        messagebox.setIcon(QMessageBox.Icon.Warning)
        messagebox.setText(message)
        messagebox.exec()

    def generate_profile(self):
        if self.profile_name_textbox.text().strip() == "":
            self.show_validation_error("Profile name cannot be empty")
            return None

        scenes = [
            line.strip()
            for line in self.scenes_textbox.toPlainText().splitlines()
            if line.strip()
        ]
        try:
            return msgspec.convert(
                {
                    "name": self.profile_name_textbox.text().strip(),
                    "target": self.selected_target.value,
                    "subtarget": self.subtargets[
                        self.subtarget_combobox.currentIndex()
                    ].value,
                    "scenes": scenes,
                    "product_name": self.product_name_textbox.text().strip(),
                    "build_path": self.build_path_textbox.text().strip(),
                },
                type=BuildProfile,
            )
        except msgspec.ValidationError as e:
            self.show_validation_error(str(e))
            return None


class AddProfileDialog(ManageProfileDialog):
    def __init__(self, parent):
        super().__init__(parent, "Add build profile", "Add")
        self.button_box.accepted.connect(self.add)

    def add(self):
        profile = self.generate_profile()
        if profile is None:
            return
        self.parent().add_profile(profile)
        self.close()


class EditProfileDialog(ManageProfileDialog):
    def __init__(self, parent, profile_index: int, profile: BuildProfile | None):
        super().__init__(
            parent,
            f"Update {profile.name}" if profile else "Set build profile",
            "Save",
        )
        if profile is not None:
            self.profile_name_textbox.setText(profile.name)
            self.target_combobox.setCurrentIndex(self.targets.index(profile.target))
            self.subtarget_combobox.setCurrentIndex(
                self.subtargets.index(profile.subtarget)
            )
            self.product_name_textbox.setText(profile.product_name)
            self.build_path_textbox.setText(profile.build_path)
            self.scenes_textbox.setPlainText("\n".join(profile.scenes))

        self.profile_index = profile_index
        self.button_box.accepted.connect(self.edit)

    def edit(self):
        profile = self.generate_profile()
        if profile is None:
            return
        self.parent().update_profile(self.profile_index, profile)
        self.close()
