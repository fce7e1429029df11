"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path

import node_janitor.core.theme as theme_module
import pytest
from node_janitor.core.theme import ThemeColors, _load_toml_colors, get_rich_theme, get_theme, load_theme
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.age_old == "#f53263"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(size="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValueError, match="must be #RGB or #RRGGBB"):
            ThemeColors(path="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(text="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(unknown_field="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_loads_valid_toml(self, tmp_path: Path) -> None:
        """Loads colors from valid TOML file."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\nsize = "#000000"\n')

        assert _load_toml_colors(theme_file) == {"size": "#000000"}

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        """Returns None when file doesn't exist."""
        assert _load_toml_colors(tmp_path / "nonexistent.toml") is None

    def test_returns_none_for_invalid_toml(self, tmp_path: Path) -> None:
        """Returns None for malformed TOML."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert _load_toml_colors(theme_file) is None


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_defaults_without_user_file(self, tmp_path: Path) -> None:
        """Missing user theme yields the defaults."""
        assert load_theme(tmp_path / "missing.toml") == ThemeColors()

    def test_user_overrides(self, tmp_path: Path) -> None:
        """User theme overrides only the given colors."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nage_old = "#ff0000"\n')

        colors = load_theme(user_theme)

        assert colors.age_old == "#ff0000"
        assert colors.success == "#03b971"

    def test_invalid_user_colors_fall_back(self, tmp_path: Path) -> None:
        """Invalid colors fall back to defaults."""
        user_theme = tmp_path / "theme.toml"
        user_theme.write_text('[colors]\nheader = "red"\n')

        assert load_theme(user_theme) == ThemeColors()


class TestGetRichTheme:
    """Tests for get_rich_theme and get_theme."""

    def test_includes_styles_used_by_cli(self) -> None:
        """Theme defines every style the CLI markup refers to."""
        theme = get_rich_theme(ThemeColors())

        for name in ("path", "size", "age_recent", "age_medium", "age_old", "bold_header", "border", "muted"):
            assert name in theme.styles

    def test_caches_theme(self) -> None:
        """get_theme returns cached instance on subsequent calls."""
        theme_module._cached_theme = None

        first = get_theme()

        assert isinstance(first, Theme)
        assert get_theme() is first
