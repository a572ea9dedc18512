"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path

import pytest
from mirrorctl.core.theme import ThemeColors, _load_toml_colors, get_rich_theme, load_theme
from pydantic import ValidationError
from rich.theme import Theme


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.header == "#69B9A1"
        assert colors.status_ok == "#03b971"

    def test_short_hex_accepted(self) -> None:
        """#RGB colors are valid."""
        assert ThemeColors(text="#abc").text == "#abc"

    @pytest.mark.parametrize("value", ["red", "#12", "#gggggg"])
    def test_invalid_colors_rejected(self, value: str) -> None:
        """Non-hex values are rejected."""
        with pytest.raises(ValidationError):
            ThemeColors(text=value)

    def test_unknown_color_rejected(self) -> None:
        """Unknown color names are rejected."""
        with pytest.raises(ValidationError):
            ThemeColors.model_validate({"sparkle": "#ffffff"})


class TestLoadTheme:
    """Tests for loading user theme overrides."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Without a theme file, defaults are used."""
        assert load_theme(tmp_path / "theme.toml") == ThemeColors()

    def test_partial_override(self, tmp_path: Path) -> None:
        """User colors override only the keys they set."""
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\nheader = "#000000"\n')

        colors = load_theme(path)

        assert colors.header == "#000000"
        assert colors.text == ThemeColors().text

    def test_invalid_override_falls_back(self, tmp_path: Path) -> None:
        """An invalid color makes the whole override fall back to defaults."""
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\nheader = "green"\n')

        assert load_theme(path) == ThemeColors()

    def test_invalid_toml_ignored(self, tmp_path: Path) -> None:
        """A theme file that is not TOML is ignored."""
        path = tmp_path / "theme.toml"
        path.write_text("[colors\n")

        assert _load_toml_colors(path) is None

    def test_non_string_values_dropped(self, tmp_path: Path) -> None:
        """Only string values are read from the colors table."""
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\nheader = "#000000"\ntext = 3\n')

        assert _load_toml_colors(path) == {"header": "#000000"}


class TestRichTheme:
    """Tests for get_rich_theme."""

    def test_status_styles_present(self) -> None:
        """The Rich theme defines every style the CLI uses."""
        theme = get_rich_theme(ThemeColors())

        assert isinstance(theme, Theme)
        for name in ("status.ok", "status.missing", "status.pending", "status.error", "path"):
            assert name in theme.styles
