"""
Deduction Transaction

Turns a confirmed sale into FEFO batch deductions and a cost of goods sold.

Availability is re-checked inside the same ledger transaction that performs
the deductions, so a stale estimate can never over-allocate a batch. For
multi-dish orders ``atomic_orders`` decides whether the whole order is
validated up front (default) or each dish is validated and committed on its
own, in which case a later failure leaves earlier dishes deducted.
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from batchcogs.errors import InsufficientStockError, InvalidQuantityError, ValidationError
from batchcogs.models.common import QTY_EPSILON, SALE_ACTOR, InventoryReason
from batchcogs.models.deductions import BatchConsumption, DishDeduction, OrderDeduction
from batchcogs.models.recipes import Dish, RecipeItem
from batchcogs.services.availability import AvailabilityEstimator, recipe_demand
from batchcogs.services.cost_accountant import CostAccountant
from batchcogs.services.ledger import BatchLedger

logger = logging.getLogger(__name__)

OrderItems = Sequence[Tuple[Dish, int]]


class DeductionTransaction:
    """Sale-time stock deduction."""

    def __init__(
        self,
        ledger: BatchLedger,
        estimator: AvailabilityEstimator,
        accountant: CostAccountant,
        atomic_orders: bool = True,
        actor: str = SALE_ACTOR,
    ):
        self.ledger = ledger
        self.estimator = estimator
        self.accountant = accountant
        self.atomic_orders = atomic_orders
        self.actor = actor

    # =========================================================================
    # Single dish
    # =========================================================================

    def deduct_for_dish(
        self,
        recipe: Iterable[RecipeItem],
        quantity: int,
        dish_name: Optional[str] = None,
    ) -> DishDeduction:
        """Validate and deduct stock for ``quantity`` servings of one recipe."""
        _check_quantity(quantity, dish_name)
        items = list(recipe)

        with self.ledger.transaction():
            if not self.estimator.is_available(items, quantity):
                raise InsufficientStockError(
                    f"Insufficient ingredients for {dish_name or 'dish'}",
                    shortfalls=self.estimator.shortfalls(recipe_demand([(items, quantity)])),
                )
            result = self._deduct(items, quantity, dish_name)

        logger.info(
            f"Deducted {quantity} x {dish_name or 'dish'}: "
            f"{len(result.consumptions)} batch(es), cost {result.cost:.2f}"
        )
        return result

    def _deduct(self, items: List[RecipeItem], quantity: int, dish_name: Optional[str]) -> DishDeduction:
        consumptions: List[BatchConsumption] = []
        for item in items:
            remaining = item.quantity_needed * quantity
            for batch in self.ledger.active_batches(item.ingredient_name):
                if remaining <= QTY_EPSILON:
                    break
                amount = min(remaining, batch.current_qty)
                applied = -self.ledger.adjust(
                    batch.batch_id, -amount, InventoryReason.SALE_DEDUCTION, self.actor
                )
                consumptions.append(self.accountant.consume(batch, applied))
                remaining -= applied
            if remaining > QTY_EPSILON:
                logger.error(
                    f"{item.ingredient_name}: {remaining} left undeducted for {dish_name or 'dish'}"
                )
                raise InsufficientStockError(
                    f"Insufficient {item.ingredient_name} for {dish_name or 'dish'}",
                    shortfalls={item.ingredient_name: remaining},
                )

        return DishDeduction(
            dish_name=dish_name,
            quantity=quantity,
            consumptions=consumptions,
            cost=self.accountant.total(consumptions),
        )

    # =========================================================================
    # Orders
    # =========================================================================

    def deduct_for_order(self, items: OrderItems) -> OrderDeduction:
        """Deduct stock for every (dish, quantity) pair of an order, in order."""
        lines = list(items)
        if not lines:
            raise ValidationError("Order has no items.")
        for dish, quantity in lines:
            _check_quantity(quantity, dish.name)

        if self.atomic_orders:
            dishes = self._deduct_order_atomic(lines)
        else:
            dishes = self._deduct_order_sequential(lines)

        total = sum(d.cost for d in dishes)
        logger.info(f"Order deducted: {len(dishes)} dish line(s), COGS {total:.2f}")
        return OrderDeduction(dishes=dishes, total_cost=total, atomic=self.atomic_orders)

    def _deduct_order_atomic(self, lines: List[Tuple[Dish, int]]) -> List[DishDeduction]:
        with self.ledger.transaction():
            for dish, quantity in lines:
                if not self.estimator.is_available(dish.recipe, quantity):
                    raise InsufficientStockError(
                        f"Insufficient ingredients for {dish.name}",
                        shortfalls=self.estimator.shortfalls(recipe_demand([(dish.recipe, quantity)])),
                    )
            # Dishes sharing an ingredient must fit together, not just one by one
            missing = self.estimator.shortfalls(recipe_demand((d.recipe, q) for d, q in lines))
            if missing:
                raise InsufficientStockError(
                    f"Insufficient ingredients for the order: {', '.join(missing)}",
                    shortfalls=missing,
                )
            return [self._deduct(list(dish.recipe), quantity, dish.name) for dish, quantity in lines]

    def _deduct_order_sequential(self, lines: List[Tuple[Dish, int]]) -> List[DishDeduction]:
        dishes: List[DishDeduction] = []
        for dish, quantity in lines:
            try:
                dishes.append(self.deduct_for_dish(dish.recipe, quantity, dish.name))
            except InsufficientStockError as e:
                committed = [d.dish_name for d in dishes]
                if committed:
                    logger.warning(
                        f"Order failed at {dish.name}; already deducted: {', '.join(committed)}"
                    )
                raise InsufficientStockError(e.message, shortfalls=e.shortfalls, committed=committed) from e
        return dishes


def _check_quantity(quantity: int, dish_name: Optional[str]) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantityError(
            f"Quantity for {dish_name or 'dish'} must be a positive whole number.", quantity
        )

