"""Startup options read from settings.json: key bindings, window size and font."""

from __future__ import annotations

import json
import logging
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Any

_log = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"
SCANCODE_UNKNOWN = 0

_INT_MAX = 2**31 - 1
_INT_MIN = -(2**31)
_JSON_WHITESPACE = "".join(chr(i) for i in range(33))
_MISSING = object()


def _build_scancode_names() -> dict[int, str]:
    names: dict[int, str] = {}
    for offset, letter in enumerate(string.ascii_uppercase):
        names[4 + offset] = letter
    for offset, digit in enumerate("1234567890"):
        names[30 + offset] = digit
    names.update({
        40: "Return", 41: "Escape", 42: "Backspace", 43: "Tab", 44: "Space",
        45: "-", 46: "=", 47: "[", 48: "]", 49: "\\", 50: "#", 51: ";",
        52: "'", 53: "`", 54: ",", 55: ".", 56: "/", 57: "CapsLock",
    })
    for offset in range(12):
        names[58 + offset] = f"F{offset + 1}"
    names.update({
        70: "PrintScreen", 71: "ScrollLock", 72: "Pause", 73: "Insert",
        74: "Home", 75: "PageUp", 76: "Delete", 77: "End", 78: "PageDown",
        79: "Right", 80: "Left", 81: "Down", 82: "Up", 83: "Numlock",
        84: "Keypad /", 85: "Keypad *", 86: "Keypad -", 87: "Keypad +",
        88: "Keypad Enter",
    })
    for offset in range(9):
        names[89 + offset] = f"Keypad {offset + 1}"
    names.update({98: "Keypad 0", 99: "Keypad .", 101: "Application", 102: "Power", 103: "Keypad ="})
    for offset in range(12):
        names[104 + offset] = f"F{13 + offset}"
    names.update({
        224: "Left Ctrl", 225: "Left Shift", 226: "Left Alt", 227: "Left GUI",
        228: "Right Ctrl", 229: "Right Shift", 230: "Right Alt", 231: "Right GUI",
    })
    return names


SCANCODE_NAMES = _build_scancode_names()
_SCANCODES_BY_NAME: dict[str, int] = {}
for _code, _name in sorted(SCANCODE_NAMES.items()):
    _SCANCODES_BY_NAME.setdefault(_name.lower(), _code)

_BUTTON_FIELDS = {
    "A": "key_a",
    "B": "key_b",
    "Start": "key_start",
    "Select": "key_select",
    "Up": "key_up",
    "Down": "key_down",
    "Left": "key_left",
    "Right": "key_right",
}

DEFAULT_SETTINGS_JSON = """{
	// For key, use an SDL scancode key name such as X, RETURN or UP
	"controls": [
		{
			"button": "A",
			"key": "X"
		},
		{
			"button": "B",
			"key": "Z"
		},
		{
			"button": "Start",
			"key": "RETURN"
		},
		{
			"button": "Select",
			"key": "TAB"
		},
		{
			"button": "Up",
			"key": "UP"
		},
		{
			"button": "Down",
			"key": "DOWN"
		},
		{
			"button": "Left",
			"key": "LEFT"
		},
		{
			"button": "Right",
			"key": "RIGHT"
		}
	],

	"fullscreenOnStartup": false,
	"startupWindowSize": {
		"width": 1305,
		"height": 738
	},

	"fontSize": 15,
	"fontStyle": "Consola.ttf"
}"""


class OptionsError(ValueError):
    """The settings document could not be turned into startup options."""


def scancode_from_name(name: Any) -> int:
    """Return the scancode for a key name, compared without regard to case."""
    if not isinstance(name, str) or name.lower() not in _SCANCODES_BY_NAME:
        raise OptionsError("invalid key name")
    return _SCANCODES_BY_NAME[name.lower()]


def scancode_name(code: int) -> str:
    """Return the display name of a scancode, or an empty string if it has none."""
    return SCANCODE_NAMES.get(code, "")


@dataclass
class StartupOptions:
    """Settings applied when the emulator starts."""

    key_a: int = _SCANCODES_BY_NAME["x"]
    key_b: int = _SCANCODES_BY_NAME["z"]
    key_start: int = _SCANCODES_BY_NAME["return"]
    key_select: int = _SCANCODES_BY_NAME["tab"]
    key_up: int = _SCANCODES_BY_NAME["up"]
    key_down: int = _SCANCODES_BY_NAME["down"]
    key_left: int = _SCANCODES_BY_NAME["left"]
    key_right: int = _SCANCODES_BY_NAME["right"]
    fullscreen_on_startup: bool = False
    startup_width: int = 1305
    startup_height: int = 738
    font_size: int = 15
    font_style: str = "Consola.ttf"


def strip_comments(text: str) -> str:
    """Blank out // comments with spaces, keeping every other character in place."""
    while (start := text.find("//")) != -1:
        end = text.find("\r\n", start)
        if end == -1:
            end = text.find("\n", start)
        if end == -1:
            end = len(text)
        text = text[:start] + " " * (end - start) + text[end:]
    return text


def _first_wins(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in pairs:
        result.setdefault(key, value)
    return result


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key, _MISSING)
    return _MISSING


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _value_int(value: float) -> int:
    if value >= _INT_MAX:
        return _INT_MAX
    if value <= _INT_MIN:
        return _INT_MIN
    return int(value)


def _decode(text: str) -> Any:
    text = strip_comments(text)
    if text.startswith("\ufeff"):
        text = text[1:]
    try:
        root, _ = json.JSONDecoder(object_pairs_hook=_first_wins).raw_decode(text.lstrip(_JSON_WHITESPACE))
    except ValueError:
        return None
    return root


def parse_options(text: str) -> StartupOptions:
    """Parse a settings document; buttons it does not bind stay unmapped."""
    root = _decode(text)
    fields: dict[str, Any] = {name: SCANCODE_UNKNOWN for name in _BUTTON_FIELDS.values()}

    controls = _get(root, "controls")
    if controls is _MISSING:
        raise OptionsError("no controls listed")
    if isinstance(controls, list):
        entries = controls
    elif isinstance(controls, dict):
        entries = list(controls.values())
    else:
        entries = []

    for control in entries:
        button = _get(control, "button")
        key = _get(control, "key")
        if button is _MISSING or key is _MISSING:
            raise OptionsError("missing button or key")
        code = scancode_from_name(key)
        field_name = _BUTTON_FIELDS.get(button) if isinstance(button, str) else None
        if field_name is None:
            raise OptionsError("invalid button name")
        fields[field_name] = code

    fullscreen = _get(root, "fullscreenOnStartup")
    if fullscreen is _MISSING:
        raise OptionsError("missing fullscreenOnStartup setting")
    if not isinstance(fullscreen, bool):
        raise OptionsError("fullscreenOnStartup not a bool")
    fields["fullscreen_on_startup"] = fullscreen

    window_size = _get(root, "startupWindowSize")
    if window_size is _MISSING:
        raise OptionsError("missing startupWindowSize")
    width = _get(window_size, "width")
    height = _get(window_size, "height")
    if width is _MISSING or height is _MISSING:
        raise OptionsError("startupWindowSize width or height invalid")
    if not _is_number(width) or not _is_number(height):
        raise OptionsError("width or height not a number")
    fields["startup_width"] = _value_int(width)
    fields["startup_height"] = _value_int(height)

    font_size = _get(root, "fontSize")
    if font_size is _MISSING:
        raise OptionsError("fontSize setting invalid")
    if not _is_number(font_size):
        raise OptionsError("fontSize not a number")
    fields["font_size"] = _value_int(font_size)

    font_style = _get(root, "fontStyle")
    if font_style is _MISSING:
        raise OptionsError("fontstyle setting invalid")
    if not isinstance(font_style, str):
        raise OptionsError("fontstyle not a string")
    fields["font_style"] = font_style

    return StartupOptions(**fields)


def load_options(path: str | Path = SETTINGS_FILE) -> StartupOptions:
    """Load options from a file, writing a default file if none exists.

    A file that cannot be parsed is reported and the defaults are used.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            text = handle.read()
    except FileNotFoundError:
        _log.warning("%s could not be found. Generating settings file", path)
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(DEFAULT_SETTINGS_JSON)
        return StartupOptions()

    try:
        return parse_options(text)
    except OptionsError as error:
        _log.error("Could not parse %s (%s)", path, error)
        _log.info("Using default settings")
        return StartupOptions()