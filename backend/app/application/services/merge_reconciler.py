"""Merge reconciler — id-keyed merge of an incoming batch into the store.

Merging is a two-step protocol. ``plan_merge`` inspects the batch against
the current store without touching it and reports id collisions.
``apply_merge`` then either declines (when collisions exist and were not
confirmed) or swaps the merged collection into the store in one step.

The merge is additive: incoming records replace same-id records entirely
or are appended; records missing from the batch are always kept.
"""

import logging

from app.application.services.product_store import ProductStore
from app.domain.entities import (
    ImportState,
    MergeOutcome,
    MergePlan,
    NormalizedBatch,
    Product,
)

logger = logging.getLogger(__name__)


class MergeReconciler:
    """Plans and applies id-keyed merges against a ``ProductStore``."""

    def __init__(self, store: ProductStore):
        self._store = store

    def plan_merge(self, batch: NormalizedBatch | list[Product]) -> MergePlan:
        """Check an incoming batch for ids that already exist in the store."""
        incoming = list(batch.products if isinstance(batch, NormalizedBatch) else batch)
        existing = self._store.ids()
        collisions = [p.id for p in incoming if p.id in existing]
        plan = MergePlan(incoming=incoming, collisions=collisions)
        logger.info(
            "Merge plan %s: %d incoming, %d collision(s)",
            plan.plan_id, len(incoming), len(collisions),
        )
        return plan

    def apply_merge(self, plan: MergePlan, confirmed: bool = False) -> MergeOutcome:
        """Apply a plan; colliding plans need ``confirmed=True`` to proceed."""
        if plan.requires_confirmation and not confirmed:
            logger.info("Merge plan %s declined — store left unchanged", plan.plan_id)
            return MergeOutcome(state=ImportState.CANCELLED)

        merged, created, overwritten = self.merge(self._store.snapshot(), plan.incoming)
        self._store.replace_all(merged)
        logger.info(
            "Merge plan %s applied: %d created, %d overwritten",
            plan.plan_id, created, overwritten,
        )
        return MergeOutcome(
            state=ImportState.MERGING,
            imported=len(plan.incoming),
            created=created,
            overwritten=overwritten,
        )

    @staticmethod
    def merge(
        current: list[Product], incoming: list[Product]
    ) -> tuple[list[Product], int, int]:
        """Pure merge by id. Returns (merged, created, overwritten)."""
        merged: dict[str, Product] = {p.id: p for p in current}
        created = overwritten = 0
        for product in incoming:
            if product.id in merged:
                overwritten += 1
            else:
                created += 1
            merged[product.id] = product.clone()
        return list(merged.values()), created, overwritten
