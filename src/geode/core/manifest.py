import logging
import shlex
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .expander import DEFAULT_MAX_DEPTH
from .runner import DEFAULT_INTERPRETER, DEFAULT_REPL
from .transpiler import DEFAULT_SUFFIX

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "geode.toml"


@dataclass
class RunConfig:
    """How generated files are executed."""

    interpreter: str = DEFAULT_INTERPRETER
    repl: str = DEFAULT_REPL
    args: list[str] = field(default_factory=list)
    delete: bool = False


@dataclass
class OutputConfig:
    """Naming of generated files."""

    suffix: str = DEFAULT_SUFFIX


@dataclass
class ExpandConfig:
    """Expander limits (None means unlimited)."""

    max_depth: int | None = DEFAULT_MAX_DEPTH


@dataclass
class GeodeConfig:
    """Settings read from geode.toml (all sections optional)."""

    run: RunConfig = field(default_factory=RunConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    expand: ExpandConfig = field(default_factory=ExpandConfig)
    path: Path | None = None


def _expect(section: str, key: str, value: Any, kind: type | tuple[type, ...]) -> Any:
    # bool is an int subclass; never accept it where a number is wanted
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        names = kind.__name__ if isinstance(kind, type) else " or ".join(k.__name__ for k in kind)
        raise ConfigError(f"[{section}] {key} must be {names}, got {value!r}")
    return value


def find_config(directory: Path) -> Path | None:
    """Return ``directory/geode.toml`` if it exists."""
    candidate = directory / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_config(path: Path) -> GeodeConfig:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid {path.name}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}")

    run_data = data.get("run", {})
    output_data = data.get("output", {})
    expand_data = data.get("expand", {})

    run_config = RunConfig()
    if "interpreter" in run_data:
        run_config.interpreter = _expect("run", "interpreter", run_data["interpreter"], str)
    if "repl" in run_data:
        run_config.repl = _expect("run", "repl", run_data["repl"], str)
    if "args" in run_data:
        args = _expect("run", "args", run_data["args"], (str, list))
        run_config.args = shlex.split(args) if isinstance(args, str) else [str(a) for a in args]
    if "delete" in run_data:
        run_config.delete = _expect("run", "delete", run_data["delete"], bool)

    output_config = OutputConfig()
    if "suffix" in output_data:
        output_config.suffix = _expect("output", "suffix", output_data["suffix"], str)

    expand_config = ExpandConfig()
    if "max_depth" in expand_data:
        max_depth = _expect("expand", "max_depth", expand_data["max_depth"], int)
        if max_depth < 1:
            raise ConfigError(f"[expand] max_depth must be at least 1, got {max_depth}")
        expand_config.max_depth = max_depth

    logger.debug("Loaded configuration from %s", path)
    return GeodeConfig(
        run=run_config,
        output=output_config,
        expand=expand_config,
        path=path,
    )
