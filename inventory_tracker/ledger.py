import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional
from pydantic import ValidationError

from . import settings
from .schemas import Product, ProductDraft
from .storage import Storage

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_product_id() -> str:
    return str(uuid.uuid4())


def _draft_fields(draft: ProductDraft) -> dict[str, Any]:
    # A full Product is also a draft; only its editable fields carry over.
    return draft.model_dump(include=set(ProductDraft.model_fields))


class LedgerStore:
    """
    The canonical product list for one session.

    Construct it with a storage backend and pass the instance to whatever needs
    it. Every mutation rewrites the full ledger to storage before returning, and
    the visible product list is only ever replaced in a single assignment.
    """

    def __init__(
        self,
        storage: Storage,
        key: str = settings.LEDGER_STORAGE_KEY,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_product_id,
    ):
        self.storage = storage
        self.key = key
        self._clock = clock
        self._id_factory = id_factory
        self._products: tuple[Product, ...] = self._load()

    # --- Reads ---

    @property
    def products(self) -> tuple[Product, ...]:
        """Immutable snapshot of the ledger at the time of the call."""
        return self._products

    def get(self, product_id: str) -> Optional[Product]:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return any(p.id == product_id for p in self._products)

    # --- Mutations ---

    def add_product(self, draft: ProductDraft) -> Product:
        now = self._clock()
        product = self._create(draft, now, self._taken_ids())
        self._commit((*self._products, product))
        logger.info(f"➕ Added product {product.sku} ({product.id}).")
        return product

    def update_product(self, product_id: str, draft: ProductDraft) -> Optional[Product]:
        """
        Replaces every field except id and createdAt. An unknown id is a no-op:
        nothing is written and None is returned.
        """
        existing = self.get(product_id)
        if existing is None:
            logger.warning(f"⚠️ Update skipped: no product with id {product_id}.")
            return None

        # Never let updatedAt fall behind createdAt, even if the clock steps back.
        now = max(self._clock(), existing.created_at)
        updated = Product(
            **_draft_fields(draft),
            id=existing.id,
            created_at=existing.created_at,
            updated_at=now,
        )
        self._commit(
            tuple(updated if p.id == product_id else p for p in self._products)
        )
        logger.info(f"✏️ Updated product {updated.sku} ({updated.id}).")
        return updated

    def delete_product(self, product_id: str) -> bool:
        """Removes the product if present. Returns False (and writes nothing) otherwise."""
        remaining = tuple(p for p in self._products if p.id != product_id)
        if len(remaining) == len(self._products):
            logger.warning(f"⚠️ Delete skipped: no product with id {product_id}.")
            return False

        self._commit(remaining)
        logger.info(f"🗑️ Deleted product {product_id}.")
        return True

    def bulk_add_products(self, drafts: Iterable[ProductDraft]) -> list[Product]:
        """Adds all drafts in order with one shared timestamp and a single write."""
        now = self._clock()
        taken = self._taken_ids()
        new_products = [self._create(draft, now, taken) for draft in drafts]
        if not new_products:
            return []

        self._commit((*self._products, *new_products))
        logger.info(f"📦 Bulk added {len(new_products)} products.")
        return new_products

    # --- Internals ---

    def _taken_ids(self) -> set[str]:
        return {p.id for p in self._products}

    def _create(self, draft: ProductDraft, now: datetime, taken: set[str]) -> Product:
        product_id = self._id_factory()
        # id_factory is injectable, so guard the uniqueness invariant here.
        while product_id in taken:
            product_id = self._id_factory()
        taken.add(product_id)
        return Product(
            **_draft_fields(draft), id=product_id, created_at=now, updated_at=now
        )

    def _commit(self, products: tuple[Product, ...]) -> None:
        self._products = products
        self.storage.save(self.key, self._serialize(products))

    @staticmethod
    def _serialize(products: Iterable[Product]) -> dict[str, Any]:
        return {
            "schemaVersion": settings.LEDGER_SCHEMA_VERSION,
            "products": [p.model_dump(mode="json", by_alias=True) for p in products],
        }

    def _load(self) -> tuple[Product, ...]:
        stored = self.storage.load(self.key, default=None)
        if stored is None:
            return ()

        # The original layout was a bare array of products with no version.
        if isinstance(stored, list):
            logger.info("Migrating unversioned ledger to schema version 1.")
            records = stored
        elif isinstance(stored, dict) and isinstance(stored.get("products"), list):
            version = stored.get("schemaVersion")
            if version != settings.LEDGER_SCHEMA_VERSION:
                logger.warning(
                    f"⚠️ Ledger schema version {version} differs from "
                    f"{settings.LEDGER_SCHEMA_VERSION}; reading it as-is."
                )
            records = stored["products"]
        else:
            logger.warning("⚠️ Stored ledger has an unknown layout. Starting empty.")
            return ()

        products = []
        seen_ids = set()
        for position, record in enumerate(records):
            try:
                product = Product.model_validate(record)
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping invalid stored product #{position}: {e}")
                continue
            if product.id in seen_ids:
                logger.warning(f"⚠️ Skipping duplicate stored product id {product.id}.")
                continue
            seen_ids.add(product.id)
            products.append(product)

        logger.info(f"Loaded {len(products)} products from storage.")
        return tuple(products)
