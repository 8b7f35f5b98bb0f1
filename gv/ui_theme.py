"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (chrome, sidebar, gutters, popups). Syntax
highlighting style for diff content remains a separate pygments setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers.

    ``added_bg``/``removed_bg`` are bare SGR parameter strings so they can be
    merged into existing sequences; an empty value disables line backgrounds.
    """

    name: str
    reset: str
    reverse: str
    dim: str
    divider: str
    header: str
    header_branch: str
    footer: str
    footer_key: str
    sidebar_title: str
    folder: str
    file: str
    cursor: str
    stat_added: str
    stat_removed: str
    file_header: str
    line_number: str
    glyph_added: str
    glyph_removed: str
    added_bg: str
    removed_bg: str
    placeholder: str
    error: str
    popup_border: str
    popup_title: str
    popup_selected: str
    popup_dim: str
    current_marker: str
    help_heading: str
    help_key: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    divider="\033[2m",
    header="\033[1;38;5;252m",
    header_branch="\033[1;38;5;81m",
    footer="\033[2;38;5;250m",
    footer_key="\033[38;5;229m",
    sidebar_title="\033[1;38;5;81m",
    folder="\033[1;34m",
    file="\033[38;5;252m",
    cursor="\033[1;38;5;229m",
    stat_added="\033[38;5;42m",
    stat_removed="\033[38;5;203m",
    file_header="\033[1;38;5;117m",
    line_number="\033[38;5;242m",
    glyph_added="\033[1;38;5;42m",
    glyph_removed="\033[1;38;5;203m",
    added_bg="48;2;36;74;52",
    removed_bg="48;2;92;43;49",
    placeholder="\033[2;3;38;5;250m",
    error="\033[1;38;5;203m",
    popup_border="\033[38;5;45m",
    popup_title="\033[1;38;5;45m",
    popup_selected="\033[1;38;5;229m",
    popup_dim="\033[2;38;5;250m",
    current_marker="\033[38;5;42m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2;38;5;110m",
    divider="\033[2;38;5;31m",
    header="\033[1;38;5;153m",
    header_branch="\033[1;38;5;45m",
    footer="\033[2;38;5;110m",
    footer_key="\033[38;5;153m",
    sidebar_title="\033[1;38;5;45m",
    folder="\033[1;38;5;45m",
    file="\033[38;5;252m",
    cursor="\033[1;38;5;153m",
    stat_added="\033[38;5;84m",
    stat_removed="\033[38;5;209m",
    file_header="\033[1;38;5;39m",
    line_number="\033[38;5;24m",
    glyph_added="\033[1;38;5;84m",
    glyph_removed="\033[1;38;5;209m",
    added_bg="48;2;22;60;64",
    removed_bg="48;2;70;36;58",
    placeholder="\033[2;3;38;5;110m",
    error="\033[1;38;5;209m",
    popup_border="\033[38;5;39m",
    popup_title="\033[1;38;5;39m",
    popup_selected="\033[1;38;5;153m",
    popup_dim="\033[2;38;5;110m",
    current_marker="\033[38;5;84m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    reverse="",
    dim="",
    divider="",
    header="",
    header_branch="",
    footer="",
    footer_key="",
    sidebar_title="",
    folder="",
    file="",
    cursor="",
    stat_added="",
    stat_removed="",
    file_header="",
    line_number="",
    glyph_added="",
    glyph_removed="",
    added_bg="",
    removed_bg="",
    placeholder="",
    error="",
    popup_border="",
    popup_title="",
    popup_selected="",
    popup_dim="",
    current_marker="",
    help_heading="",
    help_key="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    candidate = str(name or "").strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
