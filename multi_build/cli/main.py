import click

from multi_build.cli.build import build
from multi_build.cli.check import check
from multi_build.cli.config import config
from multi_build.cli.gui import gui


@click.group()
def cli():
    ...


cli.add_command(build)
cli.add_command(check)
cli.add_command(config)
cli.add_command(gui)

if __name__ == "__main__":
    cli()
