"""Audio-reactive soul signature renderer.

Draws a card's animated backdrop into numpy RGB frames. Everything that
identifies the card (the skull, its orbiting blocks, portal ring count,
floating soul pixels) comes from the transaction hash. Only intensities
move with the audio levels.

Frame layers, back to front:
    background → portal rings → center glow → orbit blocks → skull
    → overlays → laser beams → soul pixels → hit rings → scanlines
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from crypt_cards.audio.analysis import AudioLevels, HitRing
from crypt_cards.cards.models import CardType, Rarity
from crypt_cards.soul.palettes import Palette, bone_color, palette_for
from crypt_cards.soul.rng import Mulberry32, hash_to_seeds, rng_from_hash
from crypt_cards.soul.skull import HEIGHT, WIDTH, SkullIdentity, generate_skull
from crypt_cards.soul.traits import RGB

if TYPE_CHECKING:
    from crypt_cards.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 420
DEFAULT_HEIGHT = 560
FRAME_STEP = 0.016

SKULL_SCALE = 0.024
CENTER_Y_OFFSET = 15
LASER_STEPS = 20
LASER_ORIGINS = (4, 10)
LASER_ROW = 7
SCANLINE_SPACING = 3
SCANLINE_ALPHA = 0.025
RING_SPEED = 150
SOUL_RESPAWN_Y = -20

Frame = npt.NDArray[np.uint8]


@dataclass
class OrbitBlock:
    """An energy block orbiting the portal center."""

    angle: float
    radius: float
    speed: float
    size: int
    alpha: float
    pulse: float
    use_alt: bool


@dataclass
class SoulParticle:
    """A soul pixel drifting upward."""

    x: float
    y: float
    speed: float
    size: int
    alpha: float
    wobble: float


@dataclass
class SoulScene:
    """Seeded scene for one card.

    The skull is drawn first from the hash generator, then the same stream
    lays out the blocks and souls, so the scene is a pure function of the
    hash and canvas size.
    """

    identity: SkullIdentity
    palette: Palette
    blocks: list[OrbitBlock]
    souls: list[SoulParticle]
    portal_rings: int
    portal_speed: float
    rng: Mulberry32


def build_scene(
    tx_hash: str,
    rarity: Rarity | str,
    *,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> SoulScene:
    """Build the seeded scene for a transaction hash."""
    seeds = hash_to_seeds(tx_hash)
    rng = rng_from_hash(tx_hash)
    identity = generate_skull(rng)

    blocks = []
    for _ in range(20 + math.floor(seeds[1] * 15)):
        blocks.append(
            OrbitBlock(
                angle=rng() * math.pi * 2,
                radius=40 + rng() * 100,
                speed=(rng() - 0.5) * 0.015,
                size=2 + rng.randint(4),
                alpha=0.1 + rng() * 0.35,
                pulse=rng() * math.pi * 2,
                use_alt=rng() > 0.5,
            )
        )

    portal_rings = 5 + math.floor(seeds[2] * 5)
    portal_speed = seeds[3] * 0.2 + 0.08

    souls = []
    for _ in range(6 + math.floor(seeds[4] * 6)):
        souls.append(
            SoulParticle(
                x=(rng() - 0.5) * width * 0.6,
                y=rng() * height * 0.4,
                speed=0.2 + rng() * 0.5,
                size=2 + rng.randint(3),
                alpha=0.1 + rng() * 0.25,
                wobble=rng() * math.pi * 2,
            )
        )

    return SoulScene(
        identity=identity,
        palette=palette_for(rarity),
        blocks=blocks,
        souls=souls,
        portal_rings=portal_rings,
        portal_speed=portal_speed,
        rng=rng,
    )


def _blend(frame: np.ndarray, ys: np.ndarray, xs: np.ndarray, color: RGB, alpha: float) -> None:
    h, w = frame.shape[:2]
    mask = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
    if not mask.any():
        return
    ys, xs = ys[mask], xs[mask]
    a = min(max(alpha, 0.0), 1.0)
    frame[ys, xs] = frame[ys, xs] * (1 - a) + np.asarray(color, dtype=np.float32) * a


def _fill_rect(
    frame: np.ndarray, x: float, y: float, w: float, h: float, color: RGB, alpha: float = 1.0
) -> None:
    height, width = frame.shape[:2]
    x0, y0 = max(math.floor(x), 0), max(math.floor(y), 0)
    x1, y1 = min(math.floor(x + w), width), min(math.floor(y + h), height)
    if x0 >= x1 or y0 >= y1:
        return
    a = min(max(alpha, 0.0), 1.0)
    region = frame[y0:y1, x0:x1]
    region *= 1 - a
    region += np.asarray(color, dtype=np.float32) * a


def _stroke_rect(
    frame: np.ndarray,
    cx: float,
    cy: float,
    w: float,
    h: float,
    color: RGB,
    alpha: float,
    rotation: float = 0.0,
) -> None:
    cos_r, sin_r = math.cos(rotation), math.sin(rotation)
    corners = [(-w / 2, -h / 2), (w / 2, -h / 2), (w / 2, h / 2), (-w / 2, h / 2)]
    points = [(cx + px * cos_r - py * sin_r, cy + px * sin_r + py * cos_r) for px, py in corners]
    for (x0, y0), (x1, y1) in zip(points, points[1:] + points[:1], strict=True):
        steps = max(2, math.ceil(math.hypot(x1 - x0, y1 - y0)) + 1)
        xs = np.floor(np.linspace(x0, x1, steps)).astype(np.int64)
        ys = np.floor(np.linspace(y0, y1, steps)).astype(np.int64)
        _blend(frame, ys, xs, color, alpha)


class SoulRenderer:
    """Draws frames of one scene.

    Example:
        ```python
        renderer = SoulRenderer(build_scene(card.full_tx, card.rarity))
        frame = renderer.render(levels, rings, now=time.monotonic())
        ```
    """

    def __init__(
        self,
        scene: SoulScene,
        *,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> None:
        self.scene = scene
        self.width = width
        self.height = height
        self.time = 0.0

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2 - CENTER_Y_OFFSET

    def render(self, levels: AudioLevels, rings: Sequence[HitRing], now: float) -> Frame:
        """Advance one frame and draw it.

        Args:
            levels: Smoothed audio levels for this card (silent when idle).
            rings: Live hit rings.
            now: Current monotonic time in seconds.

        Returns:
            A (height, width, 3) uint8 RGB array.
        """
        self.time += FRAME_STEP
        pal = self.scene.palette
        bass = levels.bass * 0.8

        frame = np.empty((self.height, self.width, 3), dtype=np.float32)
        frame[:] = pal.bg

        self._draw_portal(frame, bass)
        self._draw_blocks(frame, bass, levels.high)
        self._draw_skull(frame, bass, levels.hit)
        self._draw_souls(frame, bass)
        self._draw_rings(frame, rings, now)

        frame[::SCANLINE_SPACING] *= 1 - SCANLINE_ALPHA
        return np.clip(frame, 0, 255).astype(np.uint8)

    def _draw_portal(self, frame: np.ndarray, bass: float) -> None:
        pal = self.scene.palette
        cx, cy = self.center
        rings = self.scene.portal_rings
        for ring in range(rings, -1, -1):
            size = 30 + ring * 22 + bass * 10
            direction = 1 if ring % 2 == 0 else -1
            rotation = self.time * self.scene.portal_speed * direction * 0.5
            alpha = (0.03 + (rings - ring) * 0.006) * (1 + bass * 1.5)
            color = pal.energy if ring % 2 == 0 else pal.energy_alt
            _stroke_rect(frame, cx, cy, size, size * 0.7, color, alpha, rotation)

        glow = 50 + bass * 20 + math.sin(self.time * 1.5) * 5
        for i in range(3, -1, -1):
            size = glow + i * 15
            alpha = (0.02 + bass * 0.03) * (1 - i * 0.2)
            _fill_rect(frame, cx - size / 2, cy - size / 2 * 0.7, size, size * 0.7, pal.energy, alpha)

    def _draw_blocks(self, frame: np.ndarray, bass: float, high: float) -> None:
        pal = self.scene.palette
        cx, cy = self.center
        for block in self.scene.blocks:
            block.angle += block.speed * (1 + high * 2)
            block.pulse += 0.02
            r = block.radius + bass * 20 + math.sin(block.pulse) * 8
            bx = cx + math.cos(block.angle) * r
            by = cy + math.sin(block.angle) * r * 0.55
            alpha = block.alpha * (0.4 + 0.6 * math.sin(self.time * 1.5 + block.pulse)) * (1 + bass)
            color = pal.energy_alt if block.use_alt else pal.energy
            _fill_rect(frame, math.floor(bx), math.floor(by), block.size, block.size, color, alpha)

    def _draw_skull(self, frame: np.ndarray, bass: float, hit: float) -> None:
        pal = self.scene.palette
        identity = self.scene.identity
        cx, cy = self.center
        scale = min(self.width, self.height) * SKULL_SCALE * (1 + bass * 0.08)
        skull_w, skull_h = WIDTH * scale, HEIGHT * scale
        sx, sy = cx - skull_w / 2, cy - skull_h / 2 + 5
        cell = math.ceil(scale) + 1

        for i in range(2, -1, -1):
            pad = i * 4
            _fill_rect(
                frame,
                sx + scale * 2 - pad,
                sy + scale - pad,
                skull_w - scale * 4 + pad * 2,
                skull_h - scale * 2 + pad * 2,
                pal.energy,
                0.02 + hit * 0.04,
            )

        pulse = 0.6 + math.sin(self.time * 3) * 0.4
        er, eg, eb = pal.energy
        glow: RGB = (
            math.floor(er * pulse + 60 * (1 - pulse)),
            math.floor(eg * pulse + 60 * (1 - pulse)),
            math.floor(eb * pulse + 60 * (1 - pulse)),
        )
        for y, row in enumerate(identity.grid):
            for x, code in enumerate(row):
                color = glow if code == "G" else bone_color(code, pal)
                if color is None:
                    continue
                _fill_rect(frame, math.floor(sx + x * scale), math.floor(sy + y * scale), cell, cell, color)

        for overlay in identity.overlays:
            _fill_rect(
                frame,
                math.floor(sx + overlay.x * scale),
                math.floor(sy + overlay.y * scale),
                cell,
                cell,
                overlay.color,
            )

        if identity.has_laser_eyes:
            alpha = 0.4 + math.sin(self.time * 5) * 0.3
            for i in range(LASER_STEPS):
                drift = i * scale * 0.5
                ly = sy + LASER_ROW * scale + i * scale * 0.3
                left, right = LASER_ORIGINS
                _fill_rect(frame, sx + left * scale - drift, ly, scale * 2, scale, pal.energy, alpha)
                _fill_rect(frame, sx + right * scale + drift, ly, scale * 2, scale, pal.energy, alpha)

    def _draw_souls(self, frame: np.ndarray, bass: float) -> None:
        pal = self.scene.palette
        cx, cy = self.center
        for soul in self.scene.souls:
            soul.y -= soul.speed * (1 + bass * 2)
            soul.wobble += 0.02
            if soul.y < SOUL_RESPAWN_Y:
                soul.y = self.height * 0.35 + self.scene.rng() * 20
            x = math.floor(cx + soul.x + math.sin(soul.wobble) * 10)
            y = math.floor(cy - 30 - soul.y)
            alpha = soul.alpha * (0.5 + math.sin(self.time + soul.wobble) * 0.5)
            size = soul.size
            _fill_rect(frame, x - size, y - size, size * 3, size * 3, pal.energy, alpha * 0.3)
            _fill_rect(frame, x, y, size, size, (255, 255, 255), alpha * 0.6)

    def _draw_rings(self, frame: np.ndarray, rings: Sequence[HitRing], now: float) -> None:
        pal = self.scene.palette
        cx, cy = self.center
        for ring in rings:
            age = ring.age(now)
            if not ring.is_alive(now) or age < 0:
                continue
            r = age * RING_SPEED * ring.intensity
            alpha = (1 - age / 2) * 0.2 * ring.intensity
            _stroke_rect(frame, cx, cy, r * 2, r * 1.2, pal.energy, alpha)


class SoulSurface:
    """Rendering surface for one visible card.

    Holds the scene for the current (tx hash, rarity, card type) key and
    rebuilds it only when one of the three changes.
    """

    def __init__(self, *, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> None:
        self.width = width
        self.height = height
        self._key: tuple[str, Rarity, CardType] | None = None
        self._renderer: SoulRenderer | None = None
        self.generations = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> SoulSurface:
        return cls(width=settings.render.width, height=settings.render.height)

    @property
    def key(self) -> tuple[str, Rarity, CardType] | None:
        return self._key

    @property
    def identity(self) -> SkullIdentity | None:
        return self._renderer.scene.identity if self._renderer else None

    def update(self, tx_hash: str, rarity: Rarity, card_type: CardType) -> SkullIdentity:
        """Point the surface at a card, regenerating only on a key change."""
        key = (tx_hash, Rarity(rarity), CardType(card_type))
        if self._renderer is None or key != self._key:
            scene = build_scene(tx_hash, key[1], width=self.width, height=self.height)
            self._renderer = SoulRenderer(scene, width=self.width, height=self.height)
            self._key = key
            self.generations += 1
            logger.debug("Built soul scene for %s (%s)", tx_hash[:10] + "...", key[1].value)
        return self._renderer.scene.identity

    def render(self, levels: AudioLevels, rings: Sequence[HitRing], now: float) -> Frame:
        """Draw the next frame.

        Raises:
            RuntimeError: If ``update`` was never called.
        """
        if self._renderer is None:
            raise RuntimeError("SoulSurface.update() must be called before render()")
        return self._renderer.render(levels, rings, now)
