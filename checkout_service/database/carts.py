"""Cart storage for the storefront"""

import json
import math
import uuid
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

from pydantic import ValidationError

from ..core.config import settings
from ..models.cart import Cart, CartItem
from .storage import CartStorage, FileStorage, MemoryStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "cart:v1"


def _whole_units(value: Any) -> Optional[int]:
    """Floor a quantity to whole units; None when not a finite number"""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return math.floor(number)


def _optional_text(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


class CartStore:
    """
    Ordered list of cart lines persisted after every mutation.

    Quantities are whole units. Invalid quantities are ignored and a line
    whose quantity drops to zero or below is removed, so no stored line ever
    has qty <= 0.
    """

    def __init__(self, storage: CartStorage, key: str = STORAGE_KEY, cart_id: Optional[str] = None):
        self.storage = storage
        self.key = key
        self.cart_id = cart_id or key
        self.items: list[CartItem] = self._load()

    def _load(self) -> list[CartItem]:
        raw = self.storage.get_item(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding unreadable cart state under {self.key}")
            return []
        if not isinstance(data, list):
            return []

        items = []
        for entry in data:
            try:
                items.append(CartItem.model_validate(entry))
            except ValidationError:
                logger.warning(f"Dropping invalid cart line under {self.key}: {entry!r}")
        return items

    def _save(self) -> None:
        value = json.dumps([item.model_dump(by_alias=True) for item in self.items])
        try:
            self.storage.set_item(self.key, value)
        except OSError as e:
            logger.warning(f"Failed to persist cart {self.cart_id}: {e}")

    def _find(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.item_id == item_id), None)

    # ==================== Mutations ====================

    def add(self, item: dict[str, Any], qty: Any = 1) -> None:
        """Add qty of an item, merging with an existing line of the same id"""
        item_id = item.get("itemId") or item.get("id")
        units = _whole_units(qty)
        if not item_id or units is None or units <= 0:
            return

        existing = self._find(str(item_id))
        if existing:
            existing.qty += units
        else:
            price = item.get("price")
            try:
                price = float(price) if price is not None else 0.0
            except (TypeError, ValueError):
                return
            if not math.isfinite(price) or price < 0:
                return

            self.items.append(
                CartItem(
                    item_id=str(item_id),
                    name=_optional_text(item.get("name")),
                    price=price,
                    image=_optional_text(item.get("image")),
                    type=_optional_text(item.get("type")),
                    qty=units,
                )
            )

        self._save()

    def decrement(self, item_id: str, step: Any = 1) -> None:
        """Lower an item's quantity, removing the line at zero"""
        units = _whole_units(step)
        if units is None or units <= 0:
            return

        item = self._find(item_id)
        if not item:
            return

        if item.qty - units <= 0:
            self.items = [i for i in self.items if i.item_id != item_id]
        else:
            item.qty -= units
        self._save()

    def set_qty(self, item_id: str, qty: Any) -> None:
        """Set an item's quantity; zero or less removes it"""
        units = _whole_units(qty)
        if units is None:
            return
        if units <= 0:
            self.remove(item_id)
            return

        item = self._find(item_id)
        if not item:
            return
        item.qty = units
        self._save()

    def remove(self, item_id: str) -> None:
        self.items = [item for item in self.items if item.item_id != item_id]
        self._save()

    def clear(self) -> None:
        self.items = []
        self._save()

    # ==================== Derived values ====================

    @property
    def count(self) -> int:
        return sum(item.qty for item in self.items)

    @property
    def total(self) -> str:
        amount = sum((Decimal(str(item.price)) * item.qty for item in self.items), Decimal("0"))
        return str(amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    def snapshot(self) -> Cart:
        return Cart(
            cart_id=self.cart_id,
            items=[item.model_copy() for item in self.items],
            count=self.count,
            total=self.total,
        )


class CartDatabase:
    """
    Per-cart stores sharing one storage backend.

    Stores are rebuilt from storage on every lookup; nothing is cached here.
    """

    def __init__(self, storage: CartStorage):
        self.storage = storage

    def _key(self, cart_id: str) -> str:
        return f"{STORAGE_KEY}:{cart_id}"

    def create_cart(self) -> CartStore:
        """Create a new empty cart"""
        cart_id = str(uuid.uuid4())
        store = CartStore(self.storage, key=self._key(cart_id), cart_id=cart_id)
        store.clear()
        return store

    def get_cart(self, cart_id: str) -> Optional[CartStore]:
        """Load a cart by ID; None when it was never created"""
        if self.storage.get_item(self._key(cart_id)) is None:
            return None
        return CartStore(self.storage, key=self._key(cart_id), cart_id=cart_id)


def build_storage(storage_dir: Optional[str]) -> CartStorage:
    if storage_dir:
        return FileStorage(storage_dir)
    return MemoryStorage()


# Singleton instance
cart_db = CartDatabase(build_storage(settings.cart_storage_dir))
