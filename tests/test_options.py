import json

import pytest

from sunnynes.options import (
    DEFAULT_SETTINGS_JSON,
    OptionsError,
    StartupOptions,
    load_options,
    parse_options,
    scancode_from_name,
    strip_comments,
)


def _document(**changes):
    doc = {
        "controls": [
            {"button": "A", "key": "X"},
            {"button": "B", "key": "Z"},
            {"button": "Start", "key": "RETURN"},
            {"button": "Select", "key": "TAB"},
            {"button": "Up", "key": "UP"},
            {"button": "Down", "key": "DOWN"},
            {"button": "Left", "key": "LEFT"},
            {"button": "Right", "key": "RIGHT"},
        ],
        "fullscreenOnStartup": False,
        "startupWindowSize": {"width": 1305, "height": 738},
        "fontSize": 15,
        "fontStyle": "Consola.ttf",
    }
    for key, value in changes.items():
        if value is None:
            del doc[key]
        else:
            doc[key] = value
    return json.dumps(doc)


def test_strip_comments_keeps_length_and_next_line():
    text = "a // comment\nb"
    result = strip_comments(text)
    assert len(result) == len(text)
    assert "//" not in result
    lines = result.split("\n")
    assert lines[0].rstrip() == "a"
    assert lines[1] == "b"


def test_scancode_lookup_ignores_case():
    assert scancode_from_name("return") == scancode_from_name("Return")
    assert scancode_from_name("RIGHT") == scancode_from_name("right")


def test_scancode_unknown_name_raises():
    with pytest.raises(OptionsError, match="invalid key name"):
        scancode_from_name("NoSuchKey")


def test_default_document_parses_to_defaults():
    assert parse_options(DEFAULT_SETTINGS_JSON) == StartupOptions()


def test_defaults_match_source_values():
    opts = StartupOptions()
    assert opts.key_a == scancode_from_name("X")
    assert opts.key_start == scancode_from_name("RETURN")
    assert (opts.startup_width, opts.startup_height) == (1305, 738)
    assert opts.font_size == 15
    assert opts.font_style == "Consola.ttf"
    assert opts.fullscreen_on_startup is False


def test_custom_values_are_read():
    text = _document(
        controls=[{"button": "A", "key": "Space"}],
        fullscreenOnStartup=True,
        startupWindowSize={"width": 640, "height": 480},
        fontSize=20,
        fontStyle="Mono.ttf",
    )
    opts = parse_options(text)
    assert opts.key_a == scancode_from_name("Space")
    assert opts.fullscreen_on_startup is True
    assert (opts.startup_width, opts.startup_height) == (640, 480)
    assert opts.font_size == 20
    assert opts.font_style == "Mono.ttf"


def test_unlisted_buttons_stay_unmapped():
    opts = parse_options(_document(controls=[{"button": "A", "key": "X"}]))
    assert opts.key_b == 0
    assert opts.key_right == 0


def test_float_sizes_truncate():
    opts = parse_options(_document(startupWindowSize={"width": 800.9, "height": 600.2}))
    assert (opts.startup_width, opts.startup_height) == (800, 600)


def test_comments_are_ignored():
    text = "// leading comment\n" + _document(fontSize=12)
    assert parse_options(text).font_size == 12


def test_first_duplicate_key_wins():
    text = '{"fontSize": 12, "fontSize": 20}'
    doc = _document()
    merged = doc[:-1] + ', "fontSize": 30}'
    assert parse_options(merged).font_size == 15
    with pytest.raises(OptionsError):
        parse_options(text)


@pytest.mark.parametrize(
    "text, message",
    [
        ("not json at all", "no controls listed"),
        (_document(controls=None), "no controls listed"),
        (_document(controls=[{"button": "A"}]), "missing button or key"),
        (_document(controls=[{"button": "A", "key": "Nope"}]), "invalid key name"),
        (_document(controls=[{"button": "Turbo", "key": "X"}]), "invalid button name"),
        (_document(fullscreenOnStartup=None), "missing fullscreenOnStartup setting"),
        (_document(fullscreenOnStartup=1), "fullscreenOnStartup not a bool"),
        (_document(startupWindowSize=None), "missing startupWindowSize"),
        (_document(startupWindowSize={"width": 10}), "startupWindowSize width or height invalid"),
        (_document(startupWindowSize={"width": "10", "height": 5}), "width or height not a number"),
        (_document(fontSize=None), "fontSize setting invalid"),
        (_document(fontSize="big"), "fontSize not a number"),
        (_document(fontStyle=None), "fontstyle setting invalid"),
        (_document(fontStyle=3), "fontstyle not a string"),
    ],
)
def test_errors(text, message):
    with pytest.raises(OptionsError, match=message):
        parse_options(text)


def test_load_missing_file_writes_defaults(tmp_path):
    path = tmp_path / "settings.json"
    opts = load_options(path)
    assert opts == StartupOptions()
    assert path.exists()
    assert parse_options(path.read_text(encoding="utf-8")) == StartupOptions()


def test_load_bad_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(_document(fontSize="big"), encoding="utf-8")
    assert load_options(path) == StartupOptions()


def test_load_good_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(_document(fontStyle="Other.ttf"), encoding="utf-8")
    assert load_options(path).font_style == "Other.ttf"