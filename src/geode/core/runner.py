"""
Interpreter and REPL invocation for generated files.
"""

import logging
import shlex
import subprocess
from collections.abc import Sequence
from pathlib import Path

from .errors import RunnerError

logger = logging.getLogger(__name__)

DEFAULT_INTERPRETER = "ruby"
DEFAULT_REPL = "irb"


def split_args(args: str | Sequence[str] | None) -> list[str]:
    """Normalize passthrough arguments given as a shell string or a list."""
    if args is None:
        return []
    if isinstance(args, str):
        return shlex.split(args)
    return list(args)


def build_eval_command(
    interpreter: str,
    output: Path,
    extra_files: Sequence[Path] = (),
    args: str | Sequence[str] | None = None,
) -> list[str]:
    """
    Build the command that runs the generated file.

    The generated file comes first, followed by any additional input files
    and then the passthrough arguments.
    """
    command = [*shlex.split(interpreter), str(output)]
    command.extend(str(path) for path in extra_files)
    command.extend(split_args(args))
    return command


def build_repl_command(
    repl: str,
    output: Path,
    args: str | Sequence[str] | None = None,
) -> list[str]:
    """Build the command that starts a REPL with the generated file required."""
    # require() needs an explicit ./ for relative paths
    target = str(output) if output.is_absolute() else f"./{output}"
    return [*shlex.split(repl), "-r", target, *split_args(args)]


def run_command(command: Sequence[str], cwd: Path | None = None) -> int:
    """
    Run ``command`` attached to the current terminal.

    Returns:
        The process exit status

    Raises:
        RunnerError: If the executable cannot be found
    """
    logger.debug("Running %s", shlex.join(command))
    try:
        result = subprocess.run(list(command), cwd=cwd)
    except FileNotFoundError as e:
        raise RunnerError(f"Could not start '{command[0]}': {e.strerror or e}")
    return result.returncode


def remove_output(path: Path) -> bool:
    """Delete a generated file. Returns True if a file was removed."""
    if path.exists():
        path.unlink()
        logger.debug("Deleted %s", path)
        return True
    return False
