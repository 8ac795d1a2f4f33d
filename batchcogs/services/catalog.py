"""
Ingredient Catalog

Registry of ingredient definitions keyed by lower-cased name.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional

from batchcogs.errors import AlreadyExistsError, ValidationError
from batchcogs.models.inventory import Ingredient

logger = logging.getLogger(__name__)


class IngredientCatalog:
    """Case-insensitive registry of ingredients."""

    def __init__(self, ingredients: Optional[Iterable[Ingredient]] = None):
        self._lock = threading.Lock()
        self._ingredients: Dict[str, Ingredient] = {}
        if ingredients:
            self.load(ingredients)

    def define(self, name: str, unit: str) -> Ingredient:
        """Register a new ingredient. Names are unique ignoring case."""
        name = (name or "").strip()
        unit = (unit or "").strip()
        if not name:
            raise ValidationError("Ingredient name is required.")
        if not unit:
            raise ValidationError("Unit of measure is required.", details={"ingredient": name})

        ingredient = Ingredient(name=name, unit=unit)
        with self._lock:
            if ingredient.key in self._ingredients:
                raise AlreadyExistsError("Ingredient", name)
            self._ingredients[ingredient.key] = ingredient

        logger.info(f"Defined ingredient {name} ({unit})")
        return ingredient

    def lookup(self, name: str) -> Optional[Ingredient]:
        """Find an ingredient by name; None when it is not defined."""
        if not name:
            return None
        with self._lock:
            return self._ingredients.get(name.strip().lower())

    def contains(self, name: str) -> bool:
        return self.lookup(name) is not None

    def list_all(self) -> List[Ingredient]:
        with self._lock:
            return list(self._ingredients.values())

    def load(self, ingredients: Iterable[Ingredient]) -> None:
        """Replace the catalog contents (used when restoring a snapshot)."""
        with self._lock:
            self._ingredients = {i.key: i for i in ingredients}

    def __len__(self) -> int:
        with self._lock:
            return len(self._ingredients)
