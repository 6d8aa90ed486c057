"""
Geode CLI - Entry point.

Expands a shorthand file into Ruby and optionally runs the result with an
interpreter or loads it into an interactive session.
"""

import logging
import platform
import shutil
import time
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from geode._version import get_version
from geode.core.errors import GeodeError
from geode.core.manifest import GeodeConfig, find_config, load_config
from geode.core.runner import (
    build_eval_command,
    build_repl_command,
    remove_output,
    run_command,
    split_args,
)
from geode.core.transpiler import default_output_path, transpile_file

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        python_version = platform.python_version()
        python_impl = platform.python_implementation()

        ruby = shutil.which("ruby")
        irb = shutil.which("irb")

        typer.echo(f"Geode version {get_version()}")
        typer.echo("")
        typer.echo("Environment:")
        typer.echo(f"  Python:        {python_impl} {python_version}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        typer.echo("")
        typer.echo("Interpreters:")
        typer.echo(f"  ruby:          {ruby or '✗ Not found on PATH'}")
        typer.echo(f"  irb:           {irb or '✗ Not found on PATH'}")

        raise typer.Exit()


def _fail(message: str, code: int = 1) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)
    raise typer.Exit(code=code)


def _load_settings(config_path: Path | None) -> GeodeConfig:
    if config_path is not None:
        return load_config(config_path)
    found = find_config(Path.cwd())
    return load_config(found) if found else GeodeConfig()


app = typer.Typer(
    help="Geode – expand bracket shorthand into Ruby",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.command()
def main(
    ctx: typer.Context,
    input_files: Annotated[
        list[Path] | None,
        typer.Argument(
            help="Shorthand file to expand, then extra files passed to the interpreter",
            show_default=False,
        ),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Output file (default: <input><timestamp>.rb)"),
    ] = None,
    evaluate: Annotated[
        bool,
        typer.Option("--eval", "--ev", "-e", help="Run the output with the interpreter (see --rbi)"),
    ] = False,
    irb: Annotated[
        bool,
        typer.Option("--irb", "-i", help="Start irb with the output loaded. Turns --eval off."),
    ] = False,
    args: Annotated[
        str | None,
        typer.Option("--args", "-a", help="Arguments for the interpreter when --eval or --irb is used"),
    ] = None,
    delete: Annotated[
        bool,
        typer.Option("--del", "-d", help="Delete the output file after execution"),
    ] = False,
    interpreter: Annotated[
        str | None,
        typer.Option(
            "--rbi",
            "-I",
            envvar="GEODE_INTERPRETER",
            help="Ruby interpreter used by --eval (default: ruby)",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to geode.toml (default: ./geode.toml if present)"),
    ] = None,
    print_output: Annotated[
        bool,
        typer.Option("--print", help="Also print the expanded text to stdout"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and environment information",
        ),
    ] = None,
) -> None:
    """Expand a shorthand file into Ruby."""
    started_at = int(time.time())

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not input_files:
        typer.echo("No input files.")
        typer.echo(ctx.get_help())
        raise typer.Exit(code=1)

    try:
        config = _load_settings(config_path)
    except GeodeError as e:
        _fail(str(e))

    source, *extra_files = input_files
    output = out or default_output_path(source, started_at, config.output.suffix)

    try:
        expanded = transpile_file(source, output, max_depth=config.expand.max_depth)
    except GeodeError as e:
        _fail(str(e))
    except OSError as e:
        _fail(str(e))

    if print_output:
        typer.echo(expanded, nl=False)
    elif not (evaluate or irb):
        typer.echo(f"✓ Expanded file written to: {output}")

    passthrough = split_args(args) if args is not None else config.run.args
    exit_code = 0
    try:
        if irb:
            if evaluate:
                logger.debug("--irb given, ignoring --eval")
            exit_code = run_command(build_repl_command(config.run.repl, output, passthrough))
        elif evaluate:
            command = build_eval_command(
                interpreter or config.run.interpreter, output, extra_files, passthrough
            )
            exit_code = run_command(command)
    except GeodeError as e:
        _fail(str(e))
    finally:
        if delete or config.run.delete:
            remove_output(output)

    if exit_code:
        raise typer.Exit(code=exit_code)


if __name__ == "__main__":
    app()
