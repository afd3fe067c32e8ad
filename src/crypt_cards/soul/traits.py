"""Declarative accessory tables for skull identities.

Each accessory is a named, ordered list of overlay pixels. Coordinates are
relative to the skull's top-left corner and may fall outside the 16x18
canvas (hats sit above it, smoke and pendants below or beside it).

Table index equals the rolled variant number, so the order of every table
is part of the identity of existing skulls.
"""

from __future__ import annotations

from dataclasses import dataclass

RGB = tuple[int, int, int]

BLK: RGB = (20, 18, 15)
WHT: RGB = (240, 235, 225)
RED: RGB = (200, 40, 30)
BLU: RGB = (40, 80, 200)
GRN: RGB = (30, 160, 80)
YEL: RGB = (220, 200, 50)
ORG: RGB = (220, 130, 30)
PNK: RGB = (220, 100, 160)
BRN: RGB = (120, 80, 40)
DBRN: RGB = (80, 50, 25)
GLD: RGB = (220, 180, 60)
SIL: RGB = (170, 175, 185)
TEAL: RGB = (0, 212, 176)
PURP: RGB = (150, 90, 255)
GRAY: RGB = (120, 120, 120)
LGRY: RGB = (180, 180, 180)
CYN: RGB = (0, 200, 220)
MAG: RGB = (200, 50, 200)
SMOKE: RGB = (180, 180, 180)
SMOKE_DARK: RGB = (150, 150, 150)
LENS_DARK: RGB = (60, 50, 40)
VISOR_DARK: RGB = (150, 30, 20)
BLOOD: RGB = (200, 0, 0)
TONGUE: RGB = (200, 80, 80)
HOOD: RGB = (100, 100, 100)


@dataclass(frozen=True)
class Overlay:
    """A single accessory pixel."""

    x: int
    y: int
    color: RGB


@dataclass(frozen=True)
class Accessory:
    """A named accessory and its pixels in draw order."""

    name: str
    pixels: tuple[Overlay, ...]


Pixels = list[Overlay]


def _hline(x0: int, x1: int, y: int, color: RGB) -> Pixels:
    return [Overlay(x, y, color) for x in range(x0, x1)]


def _block(x0: int, x1: int, y0: int, y1: int, color: RGB) -> Pixels:
    """Filled rectangle, column by column."""
    return [Overlay(x, y, color) for x in range(x0, x1) for y in range(y0, y1)]


def _columns(x0: int, x1: int, ys: tuple[int, ...], color: RGB, step: int = 1) -> Pixels:
    """Pixels at each listed row, walking columns left to right."""
    return [Overlay(x, y, color) for x in range(x0, x1, step) for y in ys]


def _rows(xs: tuple[int, ...], y0: int, y1: int, color: RGB) -> Pixels:
    """Pixels at each listed column, walking rows top to bottom."""
    return [Overlay(x, y, color) for y in range(y0, y1) for x in xs]


def _dots(color: RGB, *points: tuple[int, int]) -> Pixels:
    return [Overlay(x, y, color) for x, y in points]


def _accessory(name: str, *parts: Pixels) -> Accessory:
    return Accessory(name, tuple(p for part in parts for p in part))


HATS: tuple[Accessory, ...] = (
    _accessory(
        "cowboy",
        _hline(0, 16, -2, BRN),
        _hline(1, 15, -3, BRN),
        _hline(3, 13, -4, BRN),
        _hline(4, 12, -5, DBRN),
        _hline(5, 11, -6, BRN),
        _hline(5, 11, -3, DBRN),
    ),
    _accessory("top hat", _block(3, 13, -8, -1, BLK), _hline(2, 14, -2, BLK), _hline(4, 12, -3, DBRN)),
    _accessory(
        "beanie",
        _hline(3, 13, -2, RED),
        _hline(4, 12, -3, RED),
        _hline(5, 11, -4, RED),
        _hline(6, 10, -5, RED),
        _dots(RED, (8, -6)),
    ),
    _accessory(
        "baseball cap",
        _hline(2, 14, -2, BLU),
        _hline(3, 13, -3, BLU),
        _hline(4, 12, -4, BLU),
        _hline(0, 8, -1, BLU),
    ),
    _accessory(
        "crown",
        _hline(3, 13, -2, GLD),
        _dots(GLD, (4, -3), (6, -4), (8, -5), (10, -4), (12, -3)),
        _dots(GLD, (6, -3), (8, -4), (8, -3), (10, -3)),
        _dots(RED, (8, -4)),
    ),
    _accessory(
        "pirate hat",
        _hline(2, 14, -2, BLK),
        _hline(3, 13, -3, BLK),
        _hline(1, 5, -4, BLK),
        _hline(11, 15, -4, BLK),
        _hline(5, 11, -5, BLK),
        _dots(WHT, (7, -4), (8, -4)),
    ),
    _accessory(
        "sailor hat",
        _hline(3, 13, -2, WHT),
        _hline(4, 12, -3, WHT),
        _hline(5, 11, -4, WHT),
        _hline(3, 13, -2, BLU),
    ),
    _accessory(
        "trucker cap",
        _hline(2, 14, -2, ORG),
        _hline(3, 13, -3, ORG),
        _hline(4, 12, -4, WHT),
        _hline(0, 8, -1, ORG),
    ),
    _accessory(
        "fedora",
        _hline(1, 15, -2, GRAY),
        _hline(3, 13, -3, GRAY),
        _hline(4, 12, -4, GRAY),
        _hline(4, 12, -5, GRAY),
        _hline(3, 13, -3, BLK),
    ),
    _accessory(
        "wizard hat",
        _hline(3, 13, -2, PURP),
        _hline(4, 12, -3, PURP),
        _hline(5, 11, -4, PURP),
        _hline(6, 10, -5, PURP),
        _hline(7, 9, -6, PURP),
        _dots(PURP, (7, -7), (8, -8)),
        _dots(GLD, (7, -5)),
    ),
    _accessory("headband", _hline(1, 15, 4, RED), _dots(RED, (0, 5), (0, 6))),
    _accessory("mohawk", _rows((7, 8), -6, 0, GRN)),
    _accessory(
        "viking helmet",
        _hline(2, 14, -2, SIL),
        _hline(3, 13, -3, SIL),
        _hline(4, 12, -4, SIL),
        _dots(WHT, (1, -3), (0, -4), (-1, -5)),
        _dots(WHT, (14, -3), (15, -4), (16, -5)),
    ),
    _accessory("chef hat", _hline(3, 13, -2, WHT), _block(3, 13, -6, -2, WHT)),
    _accessory(
        "bandana",
        _hline(1, 15, -1, RED),
        _hline(2, 14, -2, RED),
        _dots(RED, (14, 0), (15, 1)),
    ),
    _accessory("halo", _hline(4, 12, -4, GLD), _dots(GLD, (3, -3), (12, -3))),
    _accessory(
        "bucket hat",
        _hline(1, 15, -2, GRN),
        _hline(3, 13, -3, GRN),
        _hline(4, 12, -4, GRN),
    ),
    _accessory(
        "santa hat",
        _hline(3, 13, -2, RED),
        _hline(4, 12, -3, RED),
        _hline(5, 11, -4, RED),
        _hline(10, 13, -5, RED),
        _dots(WHT, (13, -5)),
        _hline(3, 13, -2, WHT),
    ),
    _accessory("afro", _block(1, 15, -5, 1, BLK)),
    _accessory(
        "devil horns",
        _dots(RED, (2, -2), (1, -3), (0, -4)),
        _dots(RED, (13, -2), (14, -3), (15, -4)),
    ),
    _accessory(
        "army helmet",
        _hline(2, 14, -2, GRN),
        _hline(3, 13, -3, GRN),
        _hline(4, 12, -4, GRN),
        _hline(5, 11, -5, GRN),
    ),
    _accessory(
        "sombrero",
        _hline(-1, 17, -2, YEL),
        _hline(3, 13, -3, ORG),
        _hline(4, 12, -4, YEL),
        _hline(5, 11, -5, ORG),
    ),
    _accessory(
        "backwards cap",
        _hline(2, 14, -2, RED),
        _hline(3, 13, -3, RED),
        _hline(9, 16, -1, RED),
    ),
    _accessory(
        "durag",
        _hline(2, 14, -1, BLU),
        _hline(3, 13, -2, BLU),
        _dots(BLU, (14, 0), (15, 1), (15, 2)),
    ),
    _accessory("bowler hat", _hline(2, 14, -2, BLK), _block(4, 12, -5, -2, BLK)),
    _accessory(
        "straw hat",
        _hline(0, 16, -2, YEL),
        _hline(3, 13, -3, YEL),
        _hline(4, 12, -4, YEL),
        _hline(3, 13, -3, BRN),
    ),
    _accessory(
        "space helmet",
        _hline(1, 15, -2, LGRY),
        _hline(1, 15, -3, LGRY),
        _hline(2, 14, -4, LGRY),
        _hline(3, 13, -5, LGRY),
        _hline(2, 14, -2, CYN),
    ),
    _accessory(
        "fire",
        _dots(ORG, (6, -2)),
        _dots(RED, (7, -3)),
        _dots(YEL, (8, -4)),
        _dots(ORG, (9, -3), (7, -5)),
        _dots(RED, (8, -6), (5, -3)),
        _dots(YEL, (10, -2)),
    ),
    _accessory(
        "propeller hat",
        _hline(3, 13, -2, BLU),
        _hline(4, 12, -3, BLU),
        _dots(RED, (7, -4), (8, -4)),
        _dots(RED, (5, -5), (6, -4), (9, -4), (10, -5)),
    ),
    _accessory(
        "toque",
        _hline(3, 13, -2, TEAL),
        _hline(4, 12, -3, WHT),
        _hline(4, 12, -4, TEAL),
        _hline(5, 11, -5, TEAL),
        _hline(6, 10, -6, TEAL),
    ),
)

LASER_EYES_INDEX = 10

EYEWEAR: tuple[Accessory, ...] = (
    _accessory(
        "pit vipers",
        _hline(2, 7, 7, CYN),
        _hline(9, 14, 7, MAG),
        _hline(2, 7, 8, CYN),
        _hline(9, 14, 8, MAG),
        _hline(7, 9, 7, BLK),
    ),
    _accessory(
        "aviators",
        _hline(2, 7, 7, GLD),
        _hline(9, 14, 7, GLD),
        _hline(3, 6, 8, LENS_DARK),
        _hline(10, 13, 8, LENS_DARK),
        _hline(7, 9, 7, GLD),
    ),
    _accessory(
        "3d glasses",
        _hline(2, 7, 7, RED),
        _hline(9, 14, 7, CYN),
        _hline(2, 7, 8, RED),
        _hline(9, 14, 8, CYN),
        _hline(7, 9, 7, BLK),
    ),
    _accessory(
        "heart glasses",
        _dots(PNK, (3, 7), (4, 6), (5, 7), (4, 8)),
        _dots(PNK, (10, 7), (11, 6), (12, 7), (11, 8)),
        _hline(6, 10, 7, PNK),
    ),
    _accessory(
        "nerd glasses",
        _columns(2, 7, (6, 9), BLK),
        _columns(9, 14, (6, 9), BLK),
        _dots(BLK, (2, 7), (2, 8), (6, 7), (6, 8)),
        _dots(BLK, (9, 7), (9, 8), (13, 7), (13, 8)),
        _hline(7, 9, 7, BLK),
    ),
    _accessory(
        "monocle",
        _dots(GLD, (9, 6), (13, 6), (9, 9), (13, 9)),
        _columns(10, 13, (6, 9), GLD),
        _dots(GLD, (13, 10), (13, 11)),
    ),
    _accessory("cyclops visor", _hline(1, 15, 7, RED), _hline(1, 15, 8, VISOR_DARK)),
    _accessory(
        "thug life",
        _hline(2, 7, 8, BLK),
        _hline(9, 14, 8, BLK),
        _hline(2, 7, 7, BLK),
        _hline(9, 14, 7, BLK),
        _hline(7, 9, 8, BLK),
    ),
    _accessory(
        "star glasses",
        _dots(GLD, (4, 7), (3, 7), (5, 7), (4, 6), (4, 8)),
        _dots(GLD, (11, 7), (10, 7), (12, 7), (11, 6), (11, 8)),
        _hline(6, 10, 7, GLD),
    ),
    _accessory(
        "vr headset",
        _block(1, 15, 6, 10, BLK),
        _hline(3, 6, 7, CYN),
        _hline(10, 13, 7, CYN),
    ),
    # Drawn by the renderer as beams, no static pixels.
    _accessory("laser eyes"),
    _accessory(
        "lennon glasses",
        _dots(GLD, (3, 6), (6, 6), (3, 9), (6, 9)),
        _dots(GLD, (10, 6), (13, 6), (10, 9), (13, 9)),
        _hline(7, 10, 7, GLD),
    ),
)

MOUTH_ITEMS: tuple[Accessory, ...] = (
    _accessory(
        "cigarette",
        _hline(12, 16, 14, WHT),
        _dots(ORG, (16, 14)),
        _dots(SMOKE, (16, 13)),
        _dots(SMOKE_DARK, (17, 12)),
    ),
    _accessory(
        "pipe",
        _dots(BRN, (13, 15), (14, 15), (14, 14), (15, 14)),
        _dots(BRN, (15, 13), (15, 12), (14, 12)),
        _dots(SMOKE, (14, 11)),
    ),
    _accessory("cigar", _hline(12, 17, 14, BRN), _dots(ORG, (17, 14)), _dots(SMOKE, (17, 13))),
    _accessory("rose", _dots(GRN, (13, 14), (14, 14)), _dots(RED, (15, 14), (15, 13), (14, 13))),
    _accessory("lollipop", _dots(WHT, (13, 14), (14, 14)), _dots(PNK, (15, 13), (15, 14), (14, 13))),
    _accessory("fangs", _dots(BLOOD, (4, 16), (11, 16))),
    _accessory("bubble gum", _dots(PNK, (8, 16), (9, 16), (8, 17), (9, 17))),
    _accessory("tongue", _dots(TONGUE, (7, 16), (8, 16), (8, 17))),
)

NECK_ITEMS: tuple[Accessory, ...] = (
    _accessory("gold chain", _hline(3, 13, 17, GLD), _dots(GLD, (7, 18), (8, 18), (7, 19), (8, 19))),
    _accessory("silver chain", _hline(3, 13, 17, SIL), _dots(SIL, (8, 18))),
    _accessory(
        "bowtie",
        _dots(RED, (6, 17)),
        _dots(BLK, (7, 17), (8, 17)),
        _dots(RED, (9, 17), (5, 17), (10, 17)),
    ),
    _accessory("neck bandana", _hline(4, 12, 16, RED), _hline(5, 11, 17, RED)),
    _accessory(
        "hoodie",
        _block(0, 4, 8, 18, GRAY),
        _block(12, 16, 8, 18, GRAY),
        _block(4, 12, 16, 20, GRAY),
        _block(1, 15, -2, 3, HOOD),
    ),
    _accessory("pearls", _columns(3, 13, (17,), WHT, step=2)),
)


@dataclass(frozen=True)
class AccessorySlot:
    """Roll parameters for one accessory category."""

    name: str
    threshold: float
    table: tuple[Accessory, ...]


# Roll order: hat, eyewear, mouth, neck. Each slot consumes two draws.
ACCESSORY_SLOTS: tuple[AccessorySlot, ...] = (
    AccessorySlot("hat", 0.3, HATS),
    AccessorySlot("eyewear", 0.45, EYEWEAR),
    AccessorySlot("mouth", 0.6, MOUTH_ITEMS),
    AccessorySlot("neck", 0.5, NECK_ITEMS),
)
