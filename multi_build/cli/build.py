from pathlib import Path

import click
import msgspec

from multi_build.build_step import BuildStep, ProgressStatus
from multi_build.cli.config import config_path_option
from multi_build.config import Config
from multi_build.exceptions import BuildProcessError
from multi_build.orchestrator import BuildOrchestrator
from multi_build.unity_host import UnityHost


def start_echo(name: str):
    click.secho(f"\n> {name}", fg="green")


def end_echo(name: str, status: ProgressStatus):
    if status == ProgressStatus.succeeded:
        click.secho(f"> {name}: {status.value}", fg="green")
    else:
        click.secho(f"> {name}: {status.value}", fg="red")


def progress_echo(current: int, total: int):
    click.secho(f"[{current}/{total}]", fg="cyan")


def warning_echo(warning: str):
    click.secho(warning, fg="yellow")


def error_echo(error: str):
    click.secho(error, fg="red", err=True)


def load_config(config_path: Path):
    try:
        return Config.load(config_path)
    except msgspec.ValidationError as e:
        raise click.ClickException(f"Invalid configuration {config_path}: {e}")


def select_profiles(config: Config, profile_names: tuple[str, ...]):
    if not profile_names:
        return config.profiles
    profiles = []
    for profile_name in profile_names:
        profile = config.get_profile(profile_name)
        if profile is None:
            raise click.ClickException(f"Build profile '{profile_name}' not found")
        profiles.append(profile)
    return profiles


@click.command()
@config_path_option
@click.option("--profile", "-p", "profile_names", multiple=True)
@click.option("--verbose", "-v", is_flag=True, help="Show Unity editor output.")
def build(config_path: Path, profile_names: tuple[str, ...], verbose: bool):
    config = load_config(config_path)
    profiles = select_profiles(config, profile_names)

    BuildStep.start.set(start_echo)
    if verbose:
        BuildStep.long_message.set(click.echo)
    else:
        BuildStep.short_message.set(click.echo)
    BuildStep.progress.set(progress_echo)
    BuildStep.warning.set(warning_echo)
    BuildStep.error.set(error_echo)
    BuildStep.end.set(end_echo)

    click.secho("// Multi Build", fg="green")

    try:
        with UnityHost(config.project_path, config.editor_path) as host:
            orchestrator = BuildOrchestrator(host, profiles)
            prompt = orchestrator.build_prompt()
            if prompt is None:
                raise click.ClickException("No build profile to build")
            click.secho(prompt, bold=True)
            orchestrator.refresh_supported_platforms()
            finished_with_success = orchestrator.run_build_sequence()
    except BuildProcessError as e:
        raise click.ClickException(str(e))

    if not finished_with_success:
        raise click.exceptions.Exit(1)
