"""
Availability Estimator

How many servings of a recipe current unexpired stock can produce. The
number is a point-in-time estimate; nothing is reserved.
"""

import math
from typing import Dict, Iterable, Mapping, Tuple

from batchcogs.models.common import QTY_EPSILON
from batchcogs.models.recipes import RecipeItem
from batchcogs.services.ledger import BatchLedger


def recipe_demand(lines: Iterable[Tuple[Iterable[RecipeItem], int]]) -> Dict[str, float]:
    """Total required per ingredient, merging names case-insensitively."""
    names: Dict[str, str] = {}
    totals: Dict[str, float] = {}
    for recipe, quantity in lines:
        for item in recipe:
            key = item.ingredient_name.lower()
            names.setdefault(key, item.ingredient_name)
            totals[key] = totals.get(key, 0.0) + item.quantity_needed * quantity
    return {names[k]: v for k, v in totals.items()}


class AvailabilityEstimator:
    """Reads ledger totals under the ledger lock."""

    def __init__(self, ledger: BatchLedger):
        self.ledger = ledger

    def estimate_servings(self, recipe: Iterable[RecipeItem]) -> int:
        """
        Maximum whole servings producible right now.

        A dish without a recipe is never sellable, so an empty recipe gives 0.
        A serving counts only if the stock it needs is short by no more than
        ``QTY_EPSILON``, the same test the deduction applies.
        """
        demand = recipe_demand([(recipe, 1)])
        if not demand:
            return 0

        with self.ledger.locked():
            servings = None
            for ingredient_name, needed in demand.items():
                stock = self.ledger.total_stock(ingredient_name)
                if stock <= 0 or needed <= 0:
                    return 0
                for_item = math.floor(stock / needed + QTY_EPSILON)
                if for_item * needed - stock > QTY_EPSILON:
                    for_item -= 1
                if servings is None or for_item < servings:
                    servings = for_item
        return max(servings or 0, 0)

    def is_available(self, recipe: Iterable[RecipeItem], quantity: int) -> bool:
        demand = recipe_demand([(recipe, quantity)])
        return bool(demand) and quantity > 0 and not self.shortfalls(demand)

    def shortfalls(self, demand: Mapping[str, float]) -> Dict[str, float]:
        """Ingredients whose stock cannot cover the required amount, with the missing quantity."""
        missing = {}
        with self.ledger.locked():
            for ingredient_name, required in demand.items():
                stock = self.ledger.total_stock(ingredient_name)
                if required - stock > QTY_EPSILON:
                    missing[ingredient_name] = required - stock
        return missing
