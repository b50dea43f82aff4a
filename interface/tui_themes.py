#!/usr/bin/env python3
"""TUI themes and styling."""

from typing import Dict

from prompt_toolkit.styles import Style


def _palette(
    *,
    fg: str,
    dim: str,
    dimmer: str,
    accent: str,
    select_bg: str,
    border: str,
    green: str,
    yellow: str,
    red: str,
    blue: str,
    orange: str,
) -> Dict[str, str]:
    return {
        "": fg,
        "text": fg,
        "text.dim": dim,
        "text.dimmer": dimmer,
        "text.cont": dim,
        "header": f"{accent} bold",
        "header.view": f"{blue} bold",
        "header.filter": yellow,
        "header.timer": f"{green} bold",
        "border": border,
        "selected": f"bg:{select_bg} bold",
        "mark": f"{accent} bold",
        "input": f"{fg} bold",
        "input.prompt": f"{accent} bold",
        "suggestion": dim,
        "suggestion.current": f"bg:{select_bg} {fg} bold",
        "selector.title": f"{accent} bold",
        "selector.item": fg,
        "selector.current": f"bg:{select_bg} {fg} bold",
        "selector.check": f"{green} bold",
        "confirm": f"{red} bold",
        "status.backlog": dimmer,
        "status.pending": fg,
        "status.active": f"{blue} bold",
        "status.done": green,
        "status.archived": dimmer,
        "priority.low": dimmer,
        "priority.medium": dim,
        "priority.high": f"{orange} bold",
        "priority.urgent": f"{red} bold",
        "title.done": f"{dim} strike",
        "project": blue,
        "tag": yellow,
        "due": dim,
        "due.today": f"{yellow} bold",
        "due.overdue": f"{red} bold",
        "blocked": f"{red} bold",
        "message": f"{fg} bold",
        "footer": dimmer,
    }


THEMES: Dict[str, Dict[str, str]] = {
    "nord": _palette(
        fg="#d8dee9",
        dim="#a3acb9",
        dimmer="#6c7689",
        accent="#88c0d0",
        select_bg="#3b4252",
        border="#4c566a",
        green="#a3be8c",
        yellow="#ebcb8b",
        red="#bf616a",
        blue="#81a1c1",
        orange="#d08770",
    ),
    "dracula": _palette(
        fg="#f8f8f2",
        dim="#bfbfbf",
        dimmer="#6272a4",
        accent="#bd93f9",
        select_bg="#44475a",
        border="#6272a4",
        green="#50fa7b",
        yellow="#f1fa8c",
        red="#ff5555",
        blue="#8be9fd",
        orange="#ffb86c",
    ),
    "gruvbox": _palette(
        fg="#ebdbb2",
        dim="#bdae93",
        dimmer="#7c6f64",
        accent="#fabd2f",
        select_bg="#3c3836",
        border="#665c54",
        green="#b8bb26",
        yellow="#fabd2f",
        red="#fb4934",
        blue="#83a598",
        orange="#fe8019",
    ),
    "catppuccin": _palette(
        fg="#cdd6f4",
        dim="#a6adc8",
        dimmer="#6c7086",
        accent="#cba6f7",
        select_bg="#313244",
        border="#45475a",
        green="#a6e3a1",
        yellow="#f9e2af",
        red="#f38ba8",
        blue="#89b4fa",
        orange="#fab387",
    ),
}

DEFAULT_THEME = "nord"


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme)
    if not base:
        base = THEMES[DEFAULT_THEME]
    return dict(base)


def build_style(theme: str) -> Style:
    """Build Style object from theme name."""
    palette = get_theme_palette(theme)
    return Style.from_dict(palette)
