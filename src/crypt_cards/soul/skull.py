"""Procedural skull generator.

Every identity starts from the same hand-drawn 16x18 silhouette, so each
output reads as a skull. Trait rolls then alter eyes, nose, teeth and add
scars, cracks and an eyepatch, followed by accessory overlays.

The draw order is fixed: changing it (or the number of draws a trait
consumes) changes every existing identity.

Grid cells hold trait codes:
    ""  empty       L  light bone   M  mid bone     S  shade
    D   dark        B  socket       G  glowing socket
    T   tooth       X  gold tooth
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from crypt_cards.soul.rng import Mulberry32, rng_from_hash
from crypt_cards.soul.traits import ACCESSORY_SLOTS, LASER_EYES_INDEX, Overlay

logger = logging.getLogger(__name__)

WIDTH = 16
HEIGHT = 18

EMPTY = ""

BASE_SKULL: tuple[str, ...] = (
    "    LLMMMMLL    ",
    "   LLLLMMMMLL   ",
    "  LLLLLLMMMMSS  ",
    " LLLLLLLMMMMSSS ",
    " LLLLLLLMMMMSSS ",
    "LLLLLLLLMMMMSSSS",
    "LLLLLLLLMMMMSSSS",
    "LLLLBBLLLLBBSSSS",
    "LLLLBBLLLLBBSSSS",
    "LLLLLLLLMMMMSSSS",
    " LLLLLLLMMMMSSS ",
    " LLLLLLBBMMMSSS ",
    " LLLLLLBBMMMSSS ",
    "  LLLLMMMMMSSS  ",
    "  TT TT TT TS   ",
    "  TT TT TT TS   ",
    "   LLMMMMMSSS   ",
    "    LMMMMSSS    ",
)

# (y, x) cells, per eye style. Style 0 keeps the base sockets.
EYE_SOCKETS = ((7, 4), (7, 5), (8, 4), (8, 5), (7, 10), (7, 11), (8, 10), (8, 11))
EYE_STYLES: dict[int, tuple[tuple[int, int, str], ...]] = {
    1: ((6, 4, "B"), (6, 5, "B"), (6, 10, "B"), (6, 11, "B")),
    2: ((7, 3, "B"), (8, 3, "B"), (7, 12, "B"), (8, 12, "B")),
    3: ((7, 5, "S"), (7, 10, "S")),
    4: ((7, 4, "L"), (7, 11, "M"), (8, 5, "L"), (8, 10, "M")),
    5: ((7, 4, "L"), (7, 11, "M"), (8, 4, "L"), (8, 11, "M")),
    6: (
        (6, 4, "B"), (6, 5, "B"), (6, 6, "B"), (7, 6, "B"), (8, 6, "B"),
        (6, 9, "B"), (6, 10, "B"), (6, 11, "B"), (7, 9, "B"), (8, 9, "B"),
    ),
    7: ((7, 4, "L"), (7, 5, "L"), (7, 10, "M"), (7, 11, "M")),
}
NOSE_STYLES: dict[int, tuple[tuple[int, int, str], ...]] = {
    1: tuple((y, x, "B") for y in (11, 12) for x in (6, 7, 8)),
    2: ((12, 7, "M"), (12, 8, "M")),
    3: ((11, 7, "B"), (12, 7, "B"), (12, 8, "B")),
}
TEETH_ROWS = (14, 15)

EYE_GLOW_THRESHOLD = 0.4
SCAR_THRESHOLD = 0.6
CRACK_THRESHOLD = 0.6
EYEPATCH_THRESHOLD = 0.88


class SkullGenerationError(RuntimeError):
    """Raised when generation writes outside the skull canvas."""


@dataclass(frozen=True)
class SkullTraits:
    """Recorded trait rolls of a skull identity."""

    eye_style: int
    eye_glow: bool
    nose_style: int
    teeth_style: int
    has_scar: bool
    has_crack: bool
    has_eyepatch: bool
    hat: str | None = None
    eyewear: str | None = None
    mouth: str | None = None
    neck: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "eye_style": self.eye_style,
            "eye_glow": self.eye_glow,
            "nose_style": self.nose_style,
            "teeth_style": self.teeth_style,
            "scar": self.has_scar,
            "crack": self.has_crack,
            "eyepatch": self.has_eyepatch,
            "hat": self.hat,
            "eyewear": self.eyewear,
            "mouth": self.mouth,
            "neck": self.neck,
        }


@dataclass(frozen=True)
class SkullIdentity:
    """Deterministic pixel identity derived from a seed string.

    Attributes:
        grid: HEIGHT rows of WIDTH trait codes.
        overlays: Accessory pixels in roll order (hat, eyewear, mouth, neck).
        eye_glow: Sockets glow with the palette color.
        has_laser_eyes: Renderer draws laser beams from the sockets.
        traits: The rolls that produced this identity.
    """

    grid: tuple[tuple[str, ...], ...]
    overlays: tuple[Overlay, ...]
    eye_glow: bool
    has_laser_eyes: bool
    traits: SkullTraits = field(compare=False)

    @property
    def width(self) -> int:
        return WIDTH

    @property
    def height(self) -> int:
        return HEIGHT

    def cell(self, x: int, y: int) -> str:
        return self.grid[y][x]

    def to_text(self, empty: str = ".") -> str:
        """Render the grid as text, one row per line."""
        return "\n".join("".join(c or empty for c in row) for row in self.grid)


class _Canvas:
    """Mutable grid with bounds-checked writes."""

    def __init__(self) -> None:
        self.cells = [
            [EMPTY if ch == " " else ch for ch in row.ljust(WIDTH)] for row in BASE_SKULL
        ]

    def get(self, y: int, x: int) -> str:
        return self.cells[y][x]

    def set(self, y: int, x: int, code: str) -> None:
        if not (0 <= y < HEIGHT and 0 <= x < WIDTH):
            raise SkullGenerationError(f"write outside canvas at ({x}, {y})")
        self.cells[y][x] = code

    def in_bounds(self, y: int, x: int) -> bool:
        return 0 <= y < HEIGHT and 0 <= x < WIDTH

    def freeze(self) -> tuple[tuple[str, ...], ...]:
        return tuple(tuple(row) for row in self.cells)


def _roll_eyes(canvas: _Canvas, rng: Mulberry32) -> tuple[int, bool]:
    style = rng.randint(8)
    glow = rng.random() > EYE_GLOW_THRESHOLD
    for y, x in EYE_SOCKETS:
        canvas.set(y, x, "B")
    for y, x, code in EYE_STYLES.get(style, ()):
        canvas.set(y, x, code)
    if glow:
        for y in range(6, 10):
            for x in range(WIDTH):
                if canvas.get(y, x) == "B":
                    canvas.set(y, x, "G")
    return style, glow


def _roll_nose(canvas: _Canvas, rng: Mulberry32) -> int:
    style = rng.randint(4)
    for y, x, code in NOSE_STYLES.get(style, ()):
        canvas.set(y, x, code)
    return style


def _roll_teeth(canvas: _Canvas, rng: Mulberry32) -> int:
    style = rng.randint(6)
    if style in (1, 2):
        # Missing (1) or gold (2) pair of teeth at one of four positions.
        col = 2 + rng.randint(4) * 3
        code = EMPTY if style == 1 else "X"
        for y in TEETH_ROWS:
            canvas.set(y, col, code)
            canvas.set(y, col + 1, code)
    elif style == 3:
        canvas.set(16, 3, "T")
        canvas.set(16, 12, "T")
    elif style == 4:
        for y in TEETH_ROWS:
            for x in range(2, 14):
                if canvas.get(y, x) == "T":
                    canvas.set(y, x, "B")
    elif style == 5:
        for x in (4, 5, 7, 8, 10, 11):
            canvas.set(16, x, "T")
    return style


def _roll_scar(canvas: _Canvas, rng: Mulberry32) -> bool:
    if rng.random() <= SCAR_THRESHOLD:
        return False
    sx = 2 + rng.randint(5)
    for i in range(4):
        y = 2 + i
        x = sx + (i if rng.random() > 0.5 else 0)
        if canvas.in_bounds(y, x) and canvas.get(y, x) != EMPTY:
            canvas.set(y, x, "D")
    return True


def _roll_crack(canvas: _Canvas, rng: Mulberry32) -> bool:
    if rng.random() <= CRACK_THRESHOLD:
        return False
    x = 6 + rng.randint(4)
    y = 0
    for _ in range(5):
        if canvas.in_bounds(y, x) and canvas.get(y, x) != EMPTY:
            canvas.set(y, x, "D")
        y += 1
        x += rng.randint(3) - 1
    return True


def _roll_eyepatch(canvas: _Canvas, rng: Mulberry32) -> bool:
    if rng.random() <= EYEPATCH_THRESHOLD:
        return False
    for y in range(6, 10):
        for x in range(3, 7):
            canvas.set(y, x, "D")
    return True


def generate_skull(rng: Mulberry32) -> SkullIdentity:
    """Generate a skull identity from an initialized generator.

    Args:
        rng: Generator positioned at the start of the identity's stream.

    Returns:
        The generated SkullIdentity.

    Raises:
        SkullGenerationError: On any write outside the canvas.
    """
    canvas = _Canvas()
    eye_style, eye_glow = _roll_eyes(canvas, rng)
    nose_style = _roll_nose(canvas, rng)
    teeth_style = _roll_teeth(canvas, rng)
    has_scar = _roll_scar(canvas, rng)
    has_crack = _roll_crack(canvas, rng)
    has_eyepatch = _roll_eyepatch(canvas, rng)

    overlays: list[Overlay] = []
    picked: dict[str, str | None] = {}
    has_laser_eyes = False
    for slot in ACCESSORY_SLOTS:
        roll = rng.random()
        variant = rng.randint(len(slot.table))
        if roll <= slot.threshold:
            picked[slot.name] = None
            continue
        accessory = slot.table[variant]
        picked[slot.name] = accessory.name
        overlays.extend(accessory.pixels)
        if slot.name == "eyewear" and variant == LASER_EYES_INDEX:
            has_laser_eyes = True

    traits = SkullTraits(
        eye_style=eye_style,
        eye_glow=eye_glow,
        nose_style=nose_style,
        teeth_style=teeth_style,
        has_scar=has_scar,
        has_crack=has_crack,
        has_eyepatch=has_eyepatch,
        hat=picked.get("hat"),
        eyewear=picked.get("eyewear"),
        mouth=picked.get("mouth"),
        neck=picked.get("neck"),
    )
    return SkullIdentity(
        grid=canvas.freeze(),
        overlays=tuple(overlays),
        eye_glow=eye_glow,
        has_laser_eyes=has_laser_eyes,
        traits=traits,
    )


def generate_skull_identity(seed: str) -> SkullIdentity:
    """Generate the skull identity for a seed string (usually a tx hash).

    Pure: the same seed always yields an identical grid, overlay list and
    flags.
    """
    identity = generate_skull(rng_from_hash(seed))
    logger.debug("Generated skull for %s: %s", seed[:10] + "...", identity.traits)
    return identity
