"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: Keymaps are data files. Code asks for a keymap by name
   ("default") or by path and never hardcodes where the JSON lives.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the bundled keymaps when the tool is frozen into an executable.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_KEYMAP_PATH (str): Absolute path to the bundled default keymap.
"""
import logging
import sys
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

KEYMAP_PREFIX = "keymap_"
KEYMAP_SUFFIX = ".json"


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Installed or development mode: assets/ ships inside the cuboard package
    package_root: Path = Path(__file__).parent
    return os.path.join(str(package_root), relative_path)


def available_keymaps() -> List[str]:
    """Names of the keymaps bundled in ASSETS_PATH, e.g. ["default"]."""
    if not os.path.isdir(ASSETS_PATH):
        return []
    return sorted(
        name[len(KEYMAP_PREFIX):-len(KEYMAP_SUFFIX)]
        for name in os.listdir(ASSETS_PATH)
        if name.startswith(KEYMAP_PREFIX) and name.endswith(KEYMAP_SUFFIX)
    )


def resolve_keymap_path(name_or_path: str) -> str:
    """
    A bundled keymap name ("default") maps to assets/keymap_<name>.json;
    anything else is treated as a file path.
    """
    if name_or_path in available_keymaps():
        return os.path.join(ASSETS_PATH, f"{KEYMAP_PREFIX}{name_or_path}{KEYMAP_SUFFIX}")
    return name_or_path


# Global Constants
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_KEYMAP_PATH: str = os.path.join(ASSETS_PATH, f"{KEYMAP_PREFIX}default{KEYMAP_SUFFIX}")

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
