"""Template rendering and ANSI style composition."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")

ESC = "\033"
DEFAULT_SEQUENCE_FORMAT = ESC + "[{codes}m{line}" + ESC + "[0m"

# SGR (Select Graphic Rendition) parameters
EFFECT_CODES: dict[str, int] = {
    "normal": 0,  # all attributes off
    "bold": 1,
    "underscore": 4,
    "blink": 5,
    "reverse": 7,  # swap foreground and background
    "conceal": 8,
}
FOREGROUND_CODES: dict[str, int] = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}
BACKGROUND_CODES: dict[str, int] = {
    "black": 40,
    "red": 41,
    "green": 42,
    "yellow": 43,
    "blue": 44,
    "magenta": 45,
    "cyan": 46,
    "white": 47,
}


def _to_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def render(template: str, fields: Mapping[str, Any]) -> str:
    """Substitute ``{key}`` placeholders with values from ``fields``.

    Unknown placeholders are left verbatim. Substitution is single-pass:
    braces inside substituted values are not expanded again.
    """

    def _sub(m: re.Match[str]) -> str:
        key = m.group(1)
        if key not in fields:
            return m.group(0)
        return _to_text(fields[key])

    return _PLACEHOLDER_RE.sub(_sub, template)


def indent(text: str, prefix: str = "    ") -> str:
    """Prefix every line of ``text``."""
    return prefix + text.replace("\n", "\n" + prefix)


@dataclass(frozen=True, slots=True)
class Style:
    foreground: str | None = None
    background: str | None = None
    effects: tuple[str, ...] = ()


DEFAULT_STYLES: dict[str, Style] = {
    "default": Style("white", "black"),
    "debug": Style("green", "black", ("bold",)),
    "info": Style("cyan", "black", ("bold",)),
    "notice": Style("magenta", "cyan", ("bold",)),
    "warning": Style("yellow", "red", ("bold",)),
    "error": Style("white", "red", ("bold",)),
    "critical": Style("yellow", "red", ("bold",)),
    "alert": Style("white", "red", ("blink", "bold")),
    "emergency": Style("yellow", "red", ("blink", "bold")),
}


def style_codes(style: Style) -> list[int]:
    """Numeric SGR codes for a style: foreground, background, then effects.

    Unknown color or effect names are skipped.
    """
    codes: list[int] = []
    if style.foreground in FOREGROUND_CODES:
        codes.append(FOREGROUND_CODES[style.foreground])
    if style.background in BACKGROUND_CODES:
        codes.append(BACKGROUND_CODES[style.background])
    for effect in style.effects:
        if effect in EFFECT_CODES:
            codes.append(EFFECT_CODES[effect])
    return codes


class StyleFormatter:
    """Compose and cache ANSI code strings per level name."""

    def __init__(
        self,
        styles: Mapping[str, Style] | None = None,
        *,
        sequence_format: str = DEFAULT_SEQUENCE_FORMAT,
    ):
        self._styles = dict(DEFAULT_STYLES if styles is None else styles)
        self._sequence_format = sequence_format
        self._codes: dict[str, str] = {}

    def compose_style(self, level_name: str) -> str:
        """Return the ``;``-joined codes for a level, computing them once."""
        cached = self._codes.get(level_name)
        if cached is not None:
            return cached

        style = self._styles.get(level_name) or self._styles.get("default", Style())
        codes = ";".join(str(c) for c in style_codes(style))
        self._codes[level_name] = codes
        return codes

    def colorize(self, level_name: str, line: str) -> str:
        """Wrap ``line`` in the escape sequence for ``level_name``."""
        return render(
            self._sequence_format,
            {"codes": self.compose_style(level_name), "line": line},
        )

    @property
    def cached_levels(self) -> frozenset[str]:
        return frozenset(self._codes)
