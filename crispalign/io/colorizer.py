#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Group colorizer — legible foreground/background color combinations, handed
out one per group so repeated groups are easy to follow across rows.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

import click

from ..alignment.cells import display_name

logger = logging.getLogger(__name__)

COLORS = ['black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white']

# Spreadsheet palette: the terminal colors plus named Excel colors
EXCEL_COLORS = ['brown', 'gray', 'lime', 'navy', 'orange', 'purple', 'silver'] + COLORS

# ARGB values used for xlsx fonts and fills
EXCEL_RGB = {
    'black': 'FF000000',
    'red': 'FFFF0000',
    'green': 'FF008000',
    'yellow': 'FFFFFF00',
    'blue': 'FF0000FF',
    'magenta': 'FFFF00FF',
    'cyan': 'FF00FFFF',
    'white': 'FFFFFFFF',
    'brown': 'FF993300',
    'gray': 'FF808080',
    'lime': 'FF00FF00',
    'navy': 'FF000080',
    'orange': 'FFFF6600',
    'purple': 'FF800080',
    'silver': 'FFC0C0C0',
}

# (foreground, background) pairs that are hard to read
_ILLEGIBLE = {
    ('yellow', 'white'),
    ('cyan', 'white'),
    ('cyan', 'lime'),
    ('red', 'magenta'),
    ('magenta', 'red'),
}

_INSTANCE_SUFFIX = re.compile(r'-\d+$')

Combo = List[str]


def comboize(colors: Sequence[str]) -> List[Combo]:
    """
    Build legible color combinations.

    Each color other than black and white is usable alone; pairs skip
    same-color, white foreground, black background, and the known clashes.
    """
    combos: List[Combo] = []
    for fg in colors:
        if fg not in ('black', 'white'):
            combos.append([fg])
        for bg in colors:
            if fg == bg or fg == 'white' or bg == 'black':
                continue
            if (fg, bg) in _ILLEGIBLE:
                continue
            combos.append([fg, bg])
    return combos


def color_key(label: str) -> str:
    """Base group of a label: inferred marker and instance suffix removed."""
    return _INSTANCE_SUFFIX.sub('', display_name(label)).strip()


class Colorizer:
    """
    Hand out unique color combinations per key until they run out.

    Keys past the last combination are left uncolored. A colormap loaded
    from a previous run pins keys to the same colors.
    """

    def __init__(self, colors: Optional[Sequence[str]] = None,
                 colormap: Optional[Dict[str, Combo]] = None):
        self.colors = list(colors or COLORS)
        self.colormap: Dict[str, Optional[Combo]] = {}
        self.pinned = bool(colormap)
        if colormap:
            self.colormap.update(colormap)
            self.combos: List[Combo] = []
        else:
            self.combos = comboize(self.colors)

    def combo_for(self, label: str) -> Optional[Combo]:
        """Color combination for the base group of ``label``."""
        key = color_key(label)
        if key not in self.colormap:
            self.colormap[key] = self.combos.pop() if self.combos else None
        return self.colormap[key]

    def colorize(self, text: str, key: Optional[str] = None) -> str:
        """Wrap ``text`` in ANSI styling for ``key`` (``text`` if None)."""
        combo = self.combo_for(key if key is not None else text)
        if not combo:
            return text
        fg = combo[0]
        bg = combo[1] if len(combo) > 1 else None
        return click.style(text, fg=fg, bg=bg)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: Union[str, Path],
                  colors: Optional[Sequence[str]] = None) -> 'Colorizer':
        """
        Load a colormap JSON file.

        A missing, empty or unreadable file, or one that is not an object of
        ``group -> [fg, bg]`` lists, yields a fresh colorizer over ``colors``.
        """
        path = Path(path)
        try:
            with open(path, 'r') as f:
                colormap = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No colormap at {path}, starting fresh")
            return cls(colors=colors)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable colormap {path}: {e}")
            return cls(colors=colors)
        if not isinstance(colormap, dict) or not all(isinstance(v, list) for v in colormap.values()):
            logger.warning(f"Ignoring colormap {path}: expected an object of color lists")
            return cls(colors=colors)
        return cls(colors=colors, colormap=colormap or None)

    def save(self, path: Union[str, Path]):
        """Write the assigned colors as JSON."""
        with open(path, 'w') as f:
            json.dump({k: v for k, v in self.colormap.items() if v}, f, indent=2)
        logger.info(f"Wrote colormap to {path}")


__all__ = [
    'COLORS',
    'EXCEL_COLORS',
    'EXCEL_RGB',
    'comboize',
    'color_key',
    'Colorizer',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
