"""Package layout and entry point checks."""

import importlib

import pytest

import crypt_cards
from crypt_cards.__main__ import main


def test_version() -> None:
    assert crypt_cards.__version__ == "0.1.0"


@pytest.mark.parametrize(
    "name",
    ["audio", "cards", "detector", "ingestor", "minting", "social", "soul", "storage"],
)
def test_subpackage_imports(name: str) -> None:
    module = importlib.import_module(f"crypt_cards.{name}")
    assert module.__name__ == f"crypt_cards.{name}"


def test_entry_point_is_callable() -> None:
    assert callable(main)
