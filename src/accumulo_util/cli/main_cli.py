"""
Top-level accumulo-util CLI.

Dispatches to the maintenance commands in accumulo_util.operations and
turns their errors into a printed message and an exit code.
"""

import logging
from pathlib import Path
from typing import List, Optional

import click
import typer
from keyring.errors import KeyringError
from rich.console import Console
from rich.markup import escape
from typer.core import TyperGroup

from accumulo_util.core.config import InstallPaths, get_settings, resolve_paths
from accumulo_util.core.errors import UtilError
from accumulo_util.core.settings import DEFAULT_CERT_ALIAS
from accumulo_util.operations import build_native, dump_zoo, gen_monitor_cert, load_jars_hdfs
from accumulo_util.operations.monitor_cert import save_passwords_to_keyring


logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s %(name)s - %(message)s"
)

logger = logging.getLogger(__name__)
console = Console()
err_console = Console(stderr=True)

USAGE = """\
Usage: accumulo-util <command> (<argument> ...)

Commands:
  build-native        Builds Accumulo native libraries
  dump-zoo            Dumps data in ZooKeeper
  gen-monitor-cert    Generates Accumulo monitor certificate
  load-jars-hdfs      Loads Accumulo jars in lib/ to HDFS for VFS classloader
"""

# Commands that forward everything after their name, options included
PASSTHROUGH = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
}


def invalid_command(name: str) -> None:
    typer.echo(f"'{name}' is an invalid <command>\n")
    typer.echo(USAGE, err=True)
    raise typer.Exit(1)


class UtilGroup(TyperGroup):
    """Command group that reports unknown commands with the usage text and exit code 1."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        try:
            return super().parse_args(ctx, args)
        except click.NoSuchOption as e:
            invalid_command(e.option_name)

    def resolve_command(self, ctx: click.Context, args: List[str]):
        name = args[0] if args else ""
        if not name.startswith("-") and self.get_command(ctx, name) is None:
            invalid_command(name)
        return super().resolve_command(ctx, args)


main_app = typer.Typer(
    cls=UtilGroup,
    help="Accumulo administrative utilities",
    add_completion=False,
)


def _fail(error: UtilError) -> None:
    logger.debug(f"{type(error).__name__}: {error.message}")
    err_console.print(f"[bold red]{escape(error.message)}[/bold red]")
    raise typer.Exit(error.exit_code)


def _paths(ctx: typer.Context) -> InstallPaths:
    return ctx.obj["paths"]


@main_app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    home: Optional[Path] = typer.Option(
        None, "--home", help="Accumulo installation directory (default: ACCUMULO_HOME)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Accumulo administrative utilities.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if ctx.invoked_subcommand is None:
        invalid_command("")

    settings = get_settings()
    ctx.obj = {
        "settings": settings,
        "paths": resolve_paths(settings, home),
    }


@main_app.command("build-native", context_settings=PASSTHROUGH, add_help_option=False)
def build_native_cmd(ctx: typer.Context):
    """
    Builds Accumulo native libraries.

    Any extra arguments are passed to make as USERFLAGS.
    """
    try:
        result = build_native(_paths(ctx), ctx.args)
    except UtilError as e:
        _fail(e)

    if result.skipped:
        console.print(f"Accumulo native library already exists in {result.target}")
        return
    console.print("[bold green]Successfully installed native library[/bold green]")


@main_app.command("dump-zoo", context_settings=PASSTHROUGH, add_help_option=False)
def dump_zoo_cmd(ctx: typer.Context):
    """
    Dumps data in ZooKeeper.
    """
    try:
        code = dump_zoo(_paths(ctx), ctx.args)
    except UtilError as e:
        _fail(e)
    raise typer.Exit(code)


@main_app.command("gen-monitor-cert")
def gen_monitor_cert_cmd(
    ctx: typer.Context,
    alias: str = typer.Option(DEFAULT_CERT_ALIAS, "--alias", help="Key alias in the stores"),
    dname: Optional[str] = typer.Option(
        None, "--dname", help="Distinguished name for the certificate (keytool prompts if omitted)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Replace existing files without asking"),
    save_to_keyring: bool = typer.Option(
        False, "--save-to-keyring", help="Also store the generated passwords in the system keyring"
    ),
):
    """
    Generates Accumulo monitor certificate.
    """
    def confirm(path: Path) -> bool:
        if yes:
            return True
        return typer.confirm(f"remove {path}?", default=False)

    settings = ctx.obj["settings"]
    try:
        result = gen_monitor_cert(
            _paths(ctx), settings.java_home, confirm, dname=dname, alias=alias
        )
    except UtilError as e:
        _fail(e)

    typer.echo()
    typer.echo("keystore and truststore generated.  now add the following to accumulo.properties:")
    typer.echo()
    for key, value in result.properties().items():
        typer.echo(f"{key}={value}")
    typer.echo()

    if save_to_keyring:
        try:
            save_passwords_to_keyring(result)
            console.print("[green]Passwords saved to keyring[/green]")
        except KeyringError as e:
            logger.warning(f"Could not save passwords to keyring: {e}")
            err_console.print(f"[bold yellow]Could not save passwords to keyring: {escape(str(e))}[/bold yellow]")


@main_app.command("load-jars-hdfs")
def load_jars_hdfs_cmd(ctx: typer.Context):
    """
    Loads Accumulo jars in lib/ to HDFS for VFS classloader.
    """
    settings = ctx.obj["settings"]
    try:
        result = load_jars_hdfs(_paths(ctx), settings.hadoop_home)
    except UtilError as e:
        _fail(e)

    console.print(
        f"[bold green]Loaded {len(result.uploaded)} jars into {escape(result.classpath_dir)} "
        f"(replication {result.replication})[/bold green]"
    )


def main():
    main_app()


if __name__ == "__main__":
    main()
