"""Ask the user to pick a file through a desktop file-selection dialog."""

from __future__ import annotations

import logging
import subprocess

DIALOG_COMMAND = ["zenity", "--file-selection", "--modal"]

_log = logging.getLogger(__name__)


class FileDialogError(RuntimeError):
    """The dialog could not be shown or no file was chosen."""


def open_file_dialog() -> str:
    """Show the dialog and return the selected path."""
    try:
        result = subprocess.run(DIALOG_COMMAND, capture_output=True, text=True, check=False)
    except OSError as error:
        raise FileDialogError(f"could not start file dialog: {error}") from error

    lines = result.stdout.splitlines()
    path = lines[0] if lines else ""
    if not path:
        raise FileDialogError("no file selected")
    _log.info("selected %s", path)
    return path