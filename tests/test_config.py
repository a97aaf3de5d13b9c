"""Tests for the configuration module."""

from pathlib import Path

import pytest

from proctor import SourceType
from proctor._cli.config import (
    ConfigError,
    ProctorConfig,
    find_pyproject_toml,
    get_config,
    load_config,
)


def _write_pyproject(tmp_path: Path, content: str) -> Path:
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


class TestFindPyprojectToml:
    """Tests for find_pyproject_toml function."""

    def test_finds_in_current_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in current directory."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        result = find_pyproject_toml(tmp_path)

        assert result == pyproject

    def test_finds_in_parent_directory(self, tmp_path: Path) -> None:
        """Should find pyproject.toml in parent directory."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")
        subdir = tmp_path / "exercises" / "week1"
        subdir.mkdir(parents=True)

        result = find_pyproject_toml(subdir)

        assert result == pyproject

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        """Should return None when no pyproject.toml is found."""
        result = find_pyproject_toml(tmp_path)

        assert result is None


class TestLoadConfig:
    """Tests for loading the [tool.proctor] table."""

    def test_full_configuration(self, tmp_path: Path) -> None:
        """Should parse every supported key."""
        pyproject = _write_pyproject(
            tmp_path,
            """
[tool.proctor]
requirements = "exercises/loops.toml"
recursion_depth = 5
source_type = "module"
""",
        )

        config = load_config(pyproject)

        assert config.requirements == tmp_path / "exercises/loops.toml"
        assert config.recursion_depth == 5
        assert config.source_type is SourceType.MODULE
        assert config.project_root == tmp_path

    def test_absolute_requirements_path(self, tmp_path: Path) -> None:
        """Should keep absolute paths as they are."""
        target = tmp_path / "elsewhere" / "req.toml"
        pyproject = _write_pyproject(tmp_path, f'[tool.proctor]\nrequirements = "{target.as_posix()}"\n')

        config = load_config(pyproject)

        assert config.requirements == target

    def test_no_tool_proctor_section(self, tmp_path: Path) -> None:
        """Should return empty config when no [tool.proctor] section."""
        pyproject = _write_pyproject(tmp_path, "[project]\nname = 'test'\n")

        config = load_config(pyproject)

        assert config == ProctorConfig(project_root=tmp_path)

    def test_empty_tool_proctor_section(self, tmp_path: Path) -> None:
        """Should return empty config when [tool.proctor] is empty."""
        pyproject = _write_pyproject(tmp_path, "[tool.proctor]\n")

        config = load_config(pyproject)

        assert config.requirements is None
        assert config.recursion_depth is None
        assert config.source_type is None


class TestLoadConfigErrors:
    """Tests for configuration error handling."""

    def test_invalid_toml_raises_error(self, tmp_path: Path) -> None:
        """Should raise ConfigError for invalid TOML."""
        pyproject = _write_pyproject(tmp_path, "invalid toml [[[")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(pyproject)

    def test_invalid_requirements_type(self, tmp_path: Path) -> None:
        """Should raise ConfigError when requirements is not a string."""
        pyproject = _write_pyproject(tmp_path, "[tool.proctor]\nrequirements = 123\n")

        with pytest.raises(ConfigError, match="expected string path"):
            load_config(pyproject)

    @pytest.mark.parametrize("value", ["0", "-3", "true", '"3"', "2.0"])
    def test_invalid_recursion_depth(self, tmp_path: Path, value: str) -> None:
        """Should raise ConfigError unless the depth is a positive integer."""
        pyproject = _write_pyproject(tmp_path, f"[tool.proctor]\nrecursion_depth = {value}\n")

        with pytest.raises(ConfigError, match="positive integer"):
            load_config(pyproject)

    def test_invalid_source_type(self, tmp_path: Path) -> None:
        """Should raise ConfigError for an unknown source type."""
        pyproject = _write_pyproject(tmp_path, '[tool.proctor]\nsource_type = "commonjs"\n')

        with pytest.raises(ConfigError, match="source_type"):
            load_config(pyproject)

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Should raise ConfigError for keys it does not know."""
        pyproject = _write_pyproject(tmp_path, '[tool.proctor]\ndepth = 3\n')

        with pytest.raises(ConfigError, match="Unknown"):
            load_config(pyproject)


class TestGetConfig:
    """Tests for get_config."""

    def test_reads_from_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should load the pyproject.toml found from the working directory."""
        _write_pyproject(tmp_path, "[tool.proctor]\nrecursion_depth = 2\n")
        monkeypatch.chdir(tmp_path)

        assert get_config().recursion_depth == 2


class TestProctorConfigDataclass:
    """Tests for the ProctorConfig dataclass."""

    def test_default_values(self) -> None:
        """Should have None as default values."""
        config = ProctorConfig()

        assert config.requirements is None
        assert config.recursion_depth is None
        assert config.source_type is None
        assert config.project_root is None

    def test_frozen(self) -> None:
        """Should be frozen (immutable)."""
        config = ProctorConfig()

        with pytest.raises(AttributeError):
            config.recursion_depth = 4  # type: ignore[misc]
