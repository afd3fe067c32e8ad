"""Tests for the soul renderer and surface cache."""

import numpy as np
import pytest

from crypt_cards.audio.analysis import AudioLevels, HitRing
from crypt_cards.cards.models import CardType, Rarity
from crypt_cards.soul.palettes import PALETTES
from crypt_cards.soul.renderer import SoulRenderer, SoulSurface, build_scene
from crypt_cards.soul.skull import generate_skull_identity

TX_HASH = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
WIDTH, HEIGHT = 120, 160


class TestBuildScene:
    """Tests for build_scene."""

    def test_skull_matches_identity(self) -> None:
        scene = build_scene(TX_HASH, Rarity.RARE, width=WIDTH, height=HEIGHT)
        assert scene.identity == generate_skull_identity(TX_HASH)

    def test_counts_in_range(self) -> None:
        scene = build_scene(TX_HASH, Rarity.COMMON, width=WIDTH, height=HEIGHT)
        assert 20 <= len(scene.blocks) < 35
        assert 6 <= len(scene.souls) < 12
        assert 5 <= scene.portal_rings < 10
        assert 0.08 <= scene.portal_speed < 0.28

    def test_deterministic(self) -> None:
        a = build_scene(TX_HASH, Rarity.COMMON, width=WIDTH, height=HEIGHT)
        b = build_scene(TX_HASH, Rarity.COMMON, width=WIDTH, height=HEIGHT)
        assert a.blocks == b.blocks
        assert a.souls == b.souls
        assert a.portal_rings == b.portal_rings

    def test_palette_follows_rarity(self) -> None:
        scene = build_scene(TX_HASH, Rarity.LEGENDARY, width=WIDTH, height=HEIGHT)
        assert scene.palette == PALETTES[Rarity.LEGENDARY]


class TestSoulRenderer:
    """Tests for SoulRenderer."""

    def _renderer(self, rarity: Rarity = Rarity.RARE) -> SoulRenderer:
        scene = build_scene(TX_HASH, rarity, width=WIDTH, height=HEIGHT)
        return SoulRenderer(scene, width=WIDTH, height=HEIGHT)

    def test_frame_shape_and_dtype(self) -> None:
        frame = self._renderer().render(AudioLevels.silent(), (), now=0.0)
        assert frame.shape == (HEIGHT, WIDTH, 3)
        assert frame.dtype == np.uint8

    def test_time_advances(self) -> None:
        renderer = self._renderer()
        renderer.render(AudioLevels.silent(), (), now=0.0)
        renderer.render(AudioLevels.silent(), (), now=0.016)
        assert renderer.time == pytest.approx(0.032)

    def test_same_inputs_same_frames(self) -> None:
        a, b = self._renderer(), self._renderer()
        for step in range(3):
            now = step * 0.016
            assert np.array_equal(
                a.render(AudioLevels.silent(), (), now), b.render(AudioLevels.silent(), (), now)
            )

    def test_bass_brightens_frame(self) -> None:
        quiet = self._renderer().render(AudioLevels.silent(), (), now=0.0)
        loud = self._renderer().render(AudioLevels(bass=1.0, mid=0.5, high=0.5, hit=1.0), (), now=0.0)
        assert int(loud.astype(np.int64).sum()) > int(quiet.astype(np.int64).sum())

    def test_skull_is_drawn(self) -> None:
        frame = self._renderer().render(AudioLevels.silent(), (), now=0.0)
        # Bone colors are far brighter than any backdrop element.
        assert (frame.max(axis=2) > 150).sum() > 50

    def test_expired_rings_are_ignored(self) -> None:
        rings = (HitRing(birth=0.0, intensity=1.0),)
        with_ring = self._renderer().render(AudioLevels.silent(), rings, now=10.0)
        without = self._renderer().render(AudioLevels.silent(), (), now=10.0)
        assert np.array_equal(with_ring, without)


class TestSoulSurface:
    """Tests for SoulSurface."""

    def test_render_before_update_raises(self) -> None:
        with pytest.raises(RuntimeError):
            SoulSurface(width=WIDTH, height=HEIGHT).render(AudioLevels.silent(), (), 0.0)

    def test_regenerates_only_on_key_change(self) -> None:
        surface = SoulSurface(width=WIDTH, height=HEIGHT)
        surface.update(TX_HASH, Rarity.RARE, CardType.SWAP)
        surface.update(TX_HASH, Rarity.RARE, CardType.SWAP)
        assert surface.generations == 1

        surface.update(TX_HASH, Rarity.LEGENDARY, CardType.SWAP)
        assert surface.generations == 2
        surface.update(TX_HASH, Rarity.LEGENDARY, CardType.MINT)
        assert surface.generations == 3
        surface.update("other-hash", Rarity.LEGENDARY, CardType.MINT)
        assert surface.generations == 4

    def test_accepts_string_values(self) -> None:
        surface = SoulSurface(width=WIDTH, height=HEIGHT)
        surface.update(TX_HASH, Rarity.RARE, CardType.SWAP)
        surface.update(TX_HASH, "rare", "swap")  # type: ignore[arg-type]
        assert surface.generations == 1
        assert surface.key == (TX_HASH, Rarity.RARE, CardType.SWAP)

    def test_identity_follows_hash(self) -> None:
        surface = SoulSurface(width=WIDTH, height=HEIGHT)
        assert surface.identity is None
        identity = surface.update(TX_HASH, Rarity.COMMON, CardType.BIG_MOVE)
        assert surface.identity == identity == generate_skull_identity(TX_HASH)

    def test_render(self) -> None:
        surface = SoulSurface(width=WIDTH, height=HEIGHT)
        surface.update(TX_HASH, Rarity.COMMON, CardType.BIG_MOVE)
        frame = surface.render(AudioLevels.silent(), (), 0.0)
        assert frame.shape == (HEIGHT, WIDTH, 3)


def test_surface_from_settings(monkeypatch) -> None:
    from crypt_cards.config import Settings

    monkeypatch.setenv("RENDER_WIDTH", "200")
    monkeypatch.setenv("RENDER_HEIGHT", "300")

    surface = SoulSurface.from_settings(Settings())

    assert (surface.width, surface.height) == (200, 300)
