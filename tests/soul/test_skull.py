"""Tests for the procedural skull generator."""

import pytest

from crypt_cards.soul.rng import Mulberry32
from crypt_cards.soul.skull import (
    HEIGHT,
    WIDTH,
    SkullGenerationError,
    _Canvas,
    generate_skull,
    generate_skull_identity,
)
from crypt_cards.soul.traits import ACCESSORY_SLOTS, EYEWEAR, LASER_EYES_INDEX

VALID_CODES = {"", "L", "M", "S", "D", "B", "G", "T", "X"}


class TestGenerateSkullIdentity:
    """Tests for generate_skull_identity."""

    def test_dimensions(self) -> None:
        identity = generate_skull_identity("abc123")
        assert identity.width == WIDTH == 16
        assert identity.height == HEIGHT == 18
        assert len(identity.grid) == HEIGHT
        assert all(len(row) == WIDTH for row in identity.grid)

    def test_same_seed_identical(self) -> None:
        a = generate_skull_identity("abc123")
        b = generate_skull_identity("abc123")
        assert a.grid == b.grid
        assert a.overlays == b.overlays
        assert a.eye_glow == b.eye_glow
        assert a.has_laser_eyes == b.has_laser_eyes
        assert a.traits == b.traits

    def test_neighbouring_seeds_differ(self) -> None:
        a = generate_skull_identity("abc123")
        b = generate_skull_identity("abc124")
        assert (a.grid, a.overlays, a.traits) != (b.grid, b.overlays, b.traits)

    def test_grid_codes_are_known(self) -> None:
        for seed in ("abc123", "abc124", "5VERv8NMvzbJ", "", "z" * 88):
            identity = generate_skull_identity(seed)
            assert {c for row in identity.grid for c in row} <= VALID_CODES

    def test_still_reads_as_a_skull(self) -> None:
        # The jaw tip and crown of the base silhouette survive every roll.
        identity = generate_skull_identity("abc123")
        assert identity.cell(0, 0) == ""
        assert identity.cell(7, 17) != ""

    def test_glow_flag_matches_grid(self) -> None:
        for i in range(40):
            identity = generate_skull_identity(f"seed-{i}")
            has_glow_cell = any(c == "G" for row in identity.grid for c in row)
            if not identity.eye_glow:
                assert not has_glow_cell

    def test_laser_flag_matches_eyewear(self) -> None:
        laser_name = EYEWEAR[LASER_EYES_INDEX].name
        for i in range(60):
            identity = generate_skull_identity(f"laser-{i}")
            assert identity.has_laser_eyes == (identity.traits.eyewear == laser_name)

    def test_trait_names_come_from_tables(self) -> None:
        tables = {slot.name: {a.name for a in slot.table} for slot in ACCESSORY_SLOTS}
        for i in range(30):
            traits = generate_skull_identity(f"trait-{i}").traits
            for slot, name in (
                ("hat", traits.hat),
                ("eyewear", traits.eyewear),
                ("mouth", traits.mouth),
                ("neck", traits.neck),
            ):
                assert name is None or name in tables[slot]

    def test_to_text(self) -> None:
        text = generate_skull_identity("abc123").to_text()
        lines = text.splitlines()
        assert len(lines) == HEIGHT
        assert all(len(line) == WIDTH for line in lines)

    def test_traits_to_dict(self) -> None:
        data = generate_skull_identity("abc123").traits.to_dict()
        assert set(data) == {
            "eye_style",
            "eye_glow",
            "nose_style",
            "teeth_style",
            "scar",
            "crack",
            "eyepatch",
            "hat",
            "eyewear",
            "mouth",
            "neck",
        }


class TestGenerateSkull:
    """Tests for generate_skull with explicit generators."""

    def test_same_state_same_skull(self) -> None:
        assert generate_skull(Mulberry32(5)) == generate_skull(Mulberry32(5))

    def test_consumes_generator(self) -> None:
        rng = Mulberry32(5)
        generate_skull(rng)
        assert rng.state != Mulberry32(5).state


class TestCanvas:
    """Tests for the bounds-checked canvas."""

    def test_starts_from_base_silhouette(self) -> None:
        canvas = _Canvas()
        assert canvas.get(0, 4) == "L"
        assert canvas.get(0, 0) == ""

    @pytest.mark.parametrize("y,x", [(HEIGHT, 0), (0, WIDTH), (-1, 3), (3, -1)])
    def test_out_of_bounds_write_raises(self, y: int, x: int) -> None:
        with pytest.raises(SkullGenerationError):
            _Canvas().set(y, x, "D")

    def test_in_bounds(self) -> None:
        canvas = _Canvas()
        assert canvas.in_bounds(0, 0)
        assert canvas.in_bounds(HEIGHT - 1, WIDTH - 1)
        assert not canvas.in_bounds(HEIGHT, 0)
