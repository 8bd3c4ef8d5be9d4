from pathlib import Path

import click

from multi_build.build_step import BuildStep
from multi_build.cli.build import error_echo, load_config
from multi_build.cli.config import config_path_option
from multi_build.exceptions import BuildProcessError
from multi_build.orchestrator import BuildOrchestrator
from multi_build.platforms import get_platform_info
from multi_build.unity_host import UnityHost, validate_unity_project


@click.command()
@config_path_option
def check(config_path: Path):
    config = load_config(config_path)
    project_path = Path(config.project_path)
    if not validate_unity_project(project_path):
        raise click.ClickException(f"{project_path} is not a valid Unity project")

    BuildStep.short_message.set(click.echo)
    BuildStep.error.set(error_echo)

    try:
        with UnityHost(project_path, config.editor_path) as host:
            click.echo(f"Unity editor: {host.editor_path}")
            orchestrator = BuildOrchestrator(host, config.profiles)
            orchestrator.refresh_supported_platforms()
    except BuildProcessError as e:
        raise click.ClickException(str(e))

    for profile in orchestrator.enabled_profiles:
        build_target = get_platform_info(profile.target).build_target
        if orchestrator.is_supported(profile):
            click.secho(f"[✓] {profile.name}: {build_target}", fg="green")
        else:
            click.secho(
                f"[✘] {profile.name}: {build_target} is not supported by this Unity installation",
                fg="red",
            )
