"""NES 2A03 audio unit emulation with audio queueing, startup options, layout, GUI state and debug-view helpers."""

__version__ = "0.1.0"