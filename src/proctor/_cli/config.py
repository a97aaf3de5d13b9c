"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path

from proctor._parser import SourceType


class ConfigError(Exception):
    """Error in proctor configuration."""


@dataclass(slots=True, frozen=True)
class ProctorConfig:
    """Configuration loaded from the ``[tool.proctor]`` table of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    requirements: Path | None = None
    recursion_depth: int | None = None
    source_type: SourceType | None = None
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _parse_recursion_depth(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"Invalid [tool.proctor].recursion_depth: expected a positive integer, got {value!r}"
        raise ConfigError(msg)
    return value


def _parse_source_type(value: object) -> SourceType:
    try:
        return SourceType(value)
    except ValueError:
        choices = ", ".join(repr(member.value) for member in SourceType)
        msg = f"Invalid [tool.proctor].source_type: expected one of {choices}, got {value!r}"
        raise ConfigError(msg) from None


def load_config(pyproject_path: Path) -> ProctorConfig:
    """Load and validate [tool.proctor] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed ProctorConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    proctor_section = data.get("tool", {}).get("proctor", {})
    if not proctor_section:
        return ProctorConfig(project_root=project_root)

    unknown = sorted(set(proctor_section) - {"requirements", "recursion_depth", "source_type"})
    if unknown:
        msg = f"Unknown [tool.proctor] key(s): {', '.join(unknown)}"
        raise ConfigError(msg)

    requirements_path: Path | None = None
    if "requirements" in proctor_section:
        requirements_value = proctor_section["requirements"]
        if not isinstance(requirements_value, str):
            msg = "Invalid [tool.proctor].requirements: expected string path"
            raise ConfigError(msg)
        requirements_path = Path(requirements_value)
        if not requirements_path.is_absolute():
            requirements_path = project_root / requirements_path

    recursion_depth: int | None = None
    if "recursion_depth" in proctor_section:
        recursion_depth = _parse_recursion_depth(proctor_section["recursion_depth"])

    source_type: SourceType | None = None
    if "source_type" in proctor_section:
        source_type = _parse_source_type(proctor_section["source_type"])

    return ProctorConfig(
        requirements=requirements_path,
        recursion_depth=recursion_depth,
        source_type=source_type,
        project_root=project_root,
    )


def get_config() -> ProctorConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        ProctorConfig (may be empty if no pyproject.toml or no [tool.proctor] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return ProctorConfig()
    return load_config(pyproject_path)
