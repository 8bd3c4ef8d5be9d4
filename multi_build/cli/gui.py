from pathlib import Path

import click

from multi_build.cli.config import config_path_option


@click.command()
@config_path_option
def gui(config_path: Path):
    from multi_build.gui.main import show_gui

    show_gui(config_path)
