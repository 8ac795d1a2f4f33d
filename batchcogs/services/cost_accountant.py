"""Cost of goods sold from batch unit costs."""

from typing import Iterable

from batchcogs.models.deductions import BatchConsumption
from batchcogs.models.inventory import StockBatch


class CostAccountant:
    """Pure computation; the only state it reads is a batch's fixed unit cost."""

    def unit_cost(self, batch: StockBatch) -> float:
        return batch.unit_cost

    def consume(self, batch: StockBatch, amount: float) -> BatchConsumption:
        unit_cost = self.unit_cost(batch)
        return BatchConsumption(
            batch_id=batch.batch_id,
            ingredient_name=batch.ingredient_name,
            quantity=amount,
            unit_cost=unit_cost,
            cost=amount * unit_cost,
        )

    def total(self, consumptions: Iterable[BatchConsumption]) -> float:
        return sum(c.cost for c in consumptions)
