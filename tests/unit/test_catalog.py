"""Tests for the ingredient catalog."""

import pytest

from batchcogs.errors import AlreadyExistsError, ValidationError
from batchcogs.services.catalog import IngredientCatalog


@pytest.fixture
def catalog():
    return IngredientCatalog()


def test_define_and_lookup(catalog):
    ingredient = catalog.define("Rice", "kg")

    assert ingredient.name == "Rice"
    assert ingredient.unit == "kg"
    assert catalog.lookup("Rice") == ingredient
    assert catalog.contains("Rice")
    assert len(catalog) == 1


def test_lookup_ignores_case(catalog):
    catalog.define("Basmati Rice", "kg")

    assert catalog.lookup("basmati rice").name == "Basmati Rice"
    assert catalog.lookup("  BASMATI RICE ") is not None


def test_lookup_unknown_returns_none(catalog):
    assert catalog.lookup("Saffron") is None
    assert catalog.lookup("") is None
    assert not catalog.contains("Saffron")


def test_duplicate_name_rejected(catalog):
    catalog.define("Rice", "kg")

    with pytest.raises(AlreadyExistsError):
        catalog.define("RICE", "g")

    assert catalog.lookup("rice").unit == "kg"


def test_blank_name_or_unit_rejected(catalog):
    with pytest.raises(ValidationError):
        catalog.define("   ", "kg")
    with pytest.raises(ValidationError):
        catalog.define("Rice", "")

    assert len(catalog) == 0


def test_list_all_returns_copy(catalog):
    catalog.define("Rice", "kg")
    catalog.define("Milk", "l")

    listed = catalog.list_all()
    listed.clear()

    assert {i.name for i in catalog.list_all()} == {"Rice", "Milk"}
