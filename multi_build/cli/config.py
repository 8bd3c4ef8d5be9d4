from pathlib import Path

import click

from multi_build.config import CONFIG_PATH

EXAMPLE_CONFIG = """
project_path: C:\\Users\\gfreeman\\projects\\BlackMesa
profiles:
  - name: Black Mesa Windows
    target: Windows64
    subtarget: Player
    scenes:
      - Assets/Scenes/Boot.unity
      - Assets/Scenes/Lambda.unity
  - name: Black Mesa Server
    target: Linux64
    subtarget: Server
    product_name: BlackMesaServer
    build_path: Builds\\Server
  - name: Black Mesa Android
    target: Android
    scenes:
      - Assets/Scenes/Boot.unity
""".strip()

config_path_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=CONFIG_PATH,
    show_default=True,
)


@click.group()
def config():
    ...


@config.command()
@config_path_option
def show(config_path: Path):
    with open(
        config_path,
        encoding="utf-8",
    ) as file:
        click.echo(file.read())


@config.command()
@config_path_option
def edit(config_path: Path):
    click.launch(str(config_path), wait=True)


@config.command()
def path():
    click.echo(CONFIG_PATH)


@config.command()
def example():
    click.echo(EXAMPLE_CONFIG)
