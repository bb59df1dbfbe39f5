#!/usr/bin/env python3
"""fleetc CLI - compile provider artifacts for deployment."""

import subprocess
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from fleetc.errors import CompileError
from fleetc.log import CompileLog
from fleetc.paths import ProviderPaths
from fleetc.pipeline import compile_all
from fleetc.project_config import ProjectConfig
from fleetc.registry import NodeRegistry, Provider
from fleetc.ssh_keys import generate_keypair
from fleetc.zone import ZoneCompiler


class Context:
    """Provider state shared by the compile commands."""

    def __init__(self, root: Path):
        self.paths = ProviderPaths(root)
        self.config = ProjectConfig.load(self.paths.root)
        self.provider = Provider.load(self.paths.provider_file)
        self.registry = NodeRegistry.load(self.paths.nodes_dir, self.provider)
        self.log = CompileLog(log_file=self.config.log_path(self.paths.root))


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg='red', err=True)
    sys.exit(1)


def _load_context(root: str) -> Context:
    try:
        return Context(Path(root))
    except (ValueError, OSError, yaml.YAMLError) as e:
        _fail(f"Error: {e}")


@click.group()
@click.version_option(package_name='fleetc')
@click.option('--root', '-C', type=click.Path(exists=True, file_okay=False),
              default='.', show_default=True, help='Provider directory')
@click.pass_context
def main(ctx, root):
    """Compile a provider's node registry into deployable files."""
    ctx.obj = root


class DefaultCommandGroup(click.Group):
    """Group that hands unknown first arguments to a default subcommand.

    `fleetc compile prod` runs as `fleetc compile all prod`.
    """

    def __init__(self, *args, default_command: str = 'all', **kwargs):
        super().__init__(*args, **kwargs)
        self.default_command = default_command

    def resolve_command(self, ctx, args):
        if args and args[0] not in self.commands and not args[0].startswith('-'):
            args = [self.default_command, *args]
        return super().resolve_command(ctx, args)


@main.group('compile', cls=DefaultCommandGroup, invoke_without_command=True)
@click.pass_context
def compile_group(ctx):
    """Compile generated files (`all` is the default subcommand)."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(compile_all_command, environment=None)


@compile_group.command('all')
@click.argument('environment', required=False)
@click.pass_obj
def compile_all_command(root: str, environment: Optional[str]) -> None:
    """Compile SSH trust files and hiera files used for deployment."""
    context = _load_context(root)
    try:
        nodes = compile_all(
            context.registry, context.paths, context.log,
            environment=environment,
            pinned=context.config.environment,
            generator=generate_keypair,
        )
    except CompileError as e:
        _fail(str(e))
    except subprocess.CalledProcessError as e:
        _fail(f"Command failed ({e.returncode}): {' '.join(map(str, e.cmd))}")
    except FileNotFoundError as e:
        _fail(f"Error: {e}")

    click.echo(f"✅ Compiled {len(nodes)} node(s)", err=True)


@compile_group.command('zone')
@click.pass_obj
def compile_zone_command(root: str) -> None:
    """Compile a DNS zone file for your provider (written to stdout)."""
    context = _load_context(root)
    zone = ZoneCompiler(context.provider, context.registry,
                        serial=context.config.zone_serial())
    try:
        click.echo(zone.render(), nl=False)
    except CompileError as e:
        _fail(str(e))


if __name__ == '__main__':
    main()
