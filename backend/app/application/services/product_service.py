"""Application service (use case) for product operations and imports.

``ProductService`` owns the process-wide product store for its lifetime. It
applies each mutation to the store and then writes the whole collection to
the snapshot slot. Imports run through normalize → collision check →
(confirmation) → merge → persist, one import at a time.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable

from app.application.services.import_normalizer import ImportNormalizer
from app.application.services.merge_reconciler import MergeReconciler
from app.application.services.product_store import ProductStore
from app.application.services.snapshot_persistence import SnapshotPersistence
from app.domain.entities import (
    DEFAULT_VARIANT,
    ImportState,
    ImportTicket,
    MergePlan,
    NormalizedBatch,
    Product,
)
from app.domain.exceptions import (
    EntityNotFoundError,
    ImportInProgressError,
    PersistenceFailureError,
)
from app.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ProductImport")

ConfirmCallback = Callable[[int], bool | Awaitable[bool]]

_HTML_SUFFIXES = (".html", ".htm")


class ProductService:
    """Orchestrates product CRUD, snapshot persistence and imports."""

    def __init__(
        self,
        store: ProductStore,
        persistence: SnapshotPersistence,
        *,
        normalizer: ImportNormalizer | None = None,
        startup_warning: str | None = None,
    ):
        self._store = store
        self._persistence = persistence
        self._normalizer = normalizer or ImportNormalizer()
        self._reconciler = MergeReconciler(store)
        self._startup_warning = startup_warning

        self._import_state = ImportState.IDLE
        self._import_busy = False
        self._pending: tuple[MergePlan, NormalizedBatch] | None = None

    @classmethod
    async def open(cls, persistence: SnapshotPersistence) -> "ProductService":
        """Build the service from whatever the snapshot slot holds."""
        loaded = await persistence.load()
        return cls(
            ProductStore(loaded.products),
            persistence,
            startup_warning=loaded.warning,
        )

    @property
    def store(self) -> ProductStore:
        return self._store

    @property
    def startup_warning(self) -> str | None:
        return self._startup_warning

    @property
    def import_state(self) -> ImportState:
        return self._import_state

    @property
    def pending_plan_id(self) -> str | None:
        return self._pending[0].plan_id if self._pending else None

    # ── Reads ───────────────────────────────────────────────────────

    def get_product(self, product_id: str) -> Product:
        return self._store.require(product_id)

    def find_product(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def list_products(self) -> list[Product]:
        return self._store.list_all()

    def search_products(self, term: str) -> list[Product]:
        return self._store.search(term)

    def get_product_content(self, product_id: str, variant_key: str = DEFAULT_VARIANT) -> str:
        return self._store.get_content(product_id, variant_key)

    # ── Mutations ───────────────────────────────────────────────────

    async def create_product(self) -> Product:
        product = self._store.create()
        await self._persist()
        return product

    async def rename_product(self, product_id: str, new_name: str) -> Product:
        product = self._store.rename(product_id, new_name)
        await self._persist()
        return product

    async def change_product_id(self, old_id: str, new_id: str) -> Product:
        """Re-key a product. Raises EmptyIdError / IdConflictError with the store unchanged."""
        product = self._store.change_id(old_id, new_id)
        if product.id != old_id:
            await self._persist()
        return product

    async def set_product_content(
        self, product_id: str, variant_key: str, content: str
    ) -> Product:
        product = self._store.set_content(product_id, variant_key, content)
        await self._persist()
        return product

    async def delete_product(self, product_id: str) -> bool:
        removed = self._store.delete(product_id)
        await self._persist()
        return removed

    async def save_now(self) -> int:
        """Write the current collection again, e.g. after a failed save."""
        await self._persist()
        return len(self._store)

    # ── Imports ─────────────────────────────────────────────────────

    async def begin_import(
        self,
        payload: str | bytes,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> ImportTicket:
        """Normalize and plan an import, applying it at once if nothing collides.

        Raises:
            ImportInProgressError: another import has not finished yet.
            ParseFailureError: the payload could not be read.
            PersistenceFailureError: the merged collection could not be saved.
        """
        if self._import_busy:
            raise ImportInProgressError(self.pending_plan_id)
        self._import_busy = True
        plog.separator(f"Import: {filename or 'payload'}")
        try:
            batch = self._normalize(payload, filename=filename, content_type=content_type)

            self._import_state = ImportState.COLLISION_CHECK
            plan = self._reconciler.plan_merge(batch)
            plog.step_complete(
                PipelineStage.COLLISION_CHECK,
                f"{len(plan.collisions)} collision(s)",
                incoming=len(plan.incoming),
            )

            if plan.requires_confirmation:
                self._import_state = ImportState.AWAITING_CONFIRMATION
                self._pending = (plan, batch)
                plog.step_start(
                    PipelineStage.CONFIRM,
                    "Waiting for overwrite decision",
                    plan_id=plan.plan_id,
                )
                return self._ticket(plan, batch, ImportState.AWAITING_CONFIRMATION)

            return await self._complete(plan, batch, confirmed=True)
        finally:
            if self._pending is None:
                self._import_busy = False

    async def resolve_import(self, plan_id: str, confirmed: bool) -> ImportTicket:
        """Finish or decline the import that is awaiting confirmation.

        Raises:
            EntityNotFoundError: no import with this plan id is waiting.
            PersistenceFailureError: the merged collection could not be saved.
        """
        if self._pending is None or self._pending[0].plan_id != plan_id:
            raise EntityNotFoundError("Import", plan_id)
        plan, batch = self._pending
        self._pending = None
        try:
            return await self._complete(plan, batch, confirmed=confirmed)
        finally:
            self._import_busy = False

    async def import_payload(
        self,
        payload: str | bytes,
        confirm: ConfirmCallback | None = None,
        *,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> ImportTicket:
        """Run a whole import, asking ``confirm(collision_count)`` if ids collide.

        ``confirm`` may return a bool or an awaitable bool; without it,
        colliding imports are declined.
        """
        ticket = await self.begin_import(
            payload, filename=filename, content_type=content_type
        )
        if ticket.state != ImportState.AWAITING_CONFIRMATION:
            return ticket

        try:
            decision = confirm(ticket.collision_count) if confirm else False
            if inspect.isawaitable(decision):
                decision = await decision
        except BaseException:
            self.cancel_pending()
            raise
        return await self.resolve_import(ticket.plan_id, bool(decision))

    def cancel_pending(self) -> bool:
        """Drop an import awaiting confirmation. Returns False if none was waiting."""
        if self._pending is None:
            return False
        plan_id = self._pending[0].plan_id
        self._pending = None
        self._import_busy = False
        self._import_state = ImportState.CANCELLED
        plog.step_complete(PipelineStage.CONFIRM, "Pending import dropped", plan_id=plan_id)
        return True

    # ── Internals ───────────────────────────────────────────────────

    def _normalize(
        self,
        payload: str | bytes,
        *,
        filename: str | None,
        content_type: str | None,
    ) -> NormalizedBatch:
        self._import_state = ImportState.NORMALIZING
        legacy = bool(filename and filename.lower().endswith(_HTML_SUFFIXES)) or (
            bool(content_type) and content_type.split(";")[0].strip() == "text/html"
        )
        try:
            with plog.timed_step(PipelineStage.NORMALIZE, "Decoding payload", legacy=legacy):
                if legacy:
                    batch = self._normalizer.normalize_legacy_html(payload)
                else:
                    batch = self._normalizer.normalize(payload)
        except Exception:
            self._import_state = ImportState.FAILED
            raise
        plog.detail(
            f"{len(batch)} product(s) decoded",
            shape=batch.shape.value,
            skipped=batch.skipped,
        )
        return batch

    async def _complete(
        self, plan: MergePlan, batch: NormalizedBatch, *, confirmed: bool
    ) -> ImportTicket:
        outcome = self._reconciler.apply_merge(plan, confirmed=confirmed)
        if outcome.state == ImportState.CANCELLED:
            self._import_state = ImportState.CANCELLED
            plog.step_complete(PipelineStage.CONFIRM, "Overwrite declined — nothing imported")
            return self._ticket(plan, batch, ImportState.CANCELLED)

        self._import_state = ImportState.MERGING
        plog.step_complete(
            PipelineStage.MERGE,
            "Merged into store",
            created=outcome.created,
            overwritten=outcome.overwritten,
        )
        try:
            with plog.timed_step(PipelineStage.PERSIST, "Writing snapshot"):
                await self._persist()
        except PersistenceFailureError:
            self._import_state = ImportState.FAILED
            raise

        self._import_state = ImportState.PERSISTED
        plog.step_complete(PipelineStage.COMPLETE, f"{outcome.imported} product(s) imported")
        ticket = self._ticket(plan, batch, ImportState.PERSISTED)
        ticket.imported = outcome.imported
        ticket.created = outcome.created
        ticket.overwritten = outcome.overwritten
        return ticket

    @staticmethod
    def _ticket(plan: MergePlan, batch: NormalizedBatch, state: ImportState) -> ImportTicket:
        return ImportTicket(
            plan_id=plan.plan_id,
            state=state,
            collisions=list(plan.collisions),
            shape=batch.shape,
            skipped=batch.skipped,
        )

    async def _persist(self) -> None:
        await self._persistence.save(self._store.snapshot())
