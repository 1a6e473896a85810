"""
Order Amount Reconciliation

Turns the raw item descriptors sent by the storefront into the processor's
order payload. The server recomputes the total from item data and refuses
to create an order when it disagrees with the amount the client declared.
"""

import time
import random
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from typing import Any, Optional

from ..errors import AmountMismatchError, OrderValidationError
from ..models.order import (
    AmountBreakdown,
    ApplicationContext,
    Money,
    OrderCreateRequest,
    OrderLineItem,
    OrderPayload,
    PurchaseAmount,
    PurchaseUnit,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Processor limit for name, sku, description and custom_id
MAX_TEXT_LENGTH = 127

DISCOUNT_TYPE = "discount"

# Prices, quantities and amounts at or above this are unusable
MAX_MAGNITUDE = Decimal("1e9")


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a number or numeric string; None when not a finite number below MAX_MAGNITUDE"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or abs(number) >= MAX_MAGNITUDE:
        return None
    return number


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Two-decimal string as used in processor money fields"""
    return str(to_cents(value))


def _quantity(raw: dict[str, Any]) -> Optional[int]:
    value = raw.get("quantity")
    if value is None:
        value = raw.get("qty")
    if value is None:
        return 1
    number = to_decimal(value)
    if number is None:
        return None
    return max(1, int(number.to_integral_value(rounding=ROUND_DOWN)))


def _price(raw: dict[str, Any]) -> Optional[Decimal]:
    unit_amount = raw.get("unit_amount")
    value = None
    if isinstance(unit_amount, dict):
        value = unit_amount.get("value")
    if value is None:
        value = raw.get("price")
    if value is None:
        return ZERO
    return to_decimal(value)


def _text(value: Any) -> str:
    return str(value)[:MAX_TEXT_LENGTH]


@dataclass
class NormalizedItems:
    """Positive line items plus the discount folded out of the input"""
    line_items: list[OrderLineItem] = field(default_factory=list)
    discount_total: Decimal = ZERO
    skipped: int = 0


def normalize_items(items: Any, currency: str) -> NormalizedItems:
    """
    Split raw item descriptors into processor line items and a discount.

    - entries whose price or quantity is not a usable number are skipped
    - negative prices and items typed "discount" add |price| x qty to the
      discount total; the processor rejects negative unit amounts
    - zero-priced entries are dropped
    - everything else becomes a line item with a two-decimal unit amount
    """
    result = NormalizedItems()
    if not isinstance(items, list):
        return result

    for index, raw in enumerate(items):
        if not isinstance(raw, dict):
            result.skipped += 1
            continue

        price = _price(raw)
        if price is None:
            result.skipped += 1
            continue

        qty = _quantity(raw)
        if qty is None:
            result.skipped += 1
            continue
        price = to_cents(price)

        if price < 0 or raw.get("type") == DISCOUNT_TYPE:
            result.discount_total += abs(price) * qty
            continue

        if price == 0:
            continue

        sku = raw.get("sku")
        if sku is None:
            sku = raw.get("itemId")
        sku = _text(sku) if sku is not None else ""
        label = f"Item {index + 1}"
        description = raw.get("description")
        if description is None:
            description = sku or label
        name = raw.get("name")
        if name is None:
            name = label

        result.line_items.append(
            OrderLineItem(
                name=_text(name),
                sku=sku,
                quantity=str(qty),
                description=_text(description),
                unit_amount=Money(currency_code=currency, value=format_amount(price)),
            )
        )

    return result


@dataclass
class OrderTotals:
    item_total: Decimal
    discount: Decimal
    net: Decimal

    def as_strings(self) -> dict[str, str]:
        return {
            "item_total": format_amount(self.item_total),
            "discount": format_amount(self.discount),
            "net": format_amount(self.net),
        }


def compute_totals(line_items: list[OrderLineItem], discount_total: Decimal) -> OrderTotals:
    """Item total, discount and net (never below zero)"""
    item_total = sum(
        (Decimal(item.unit_amount.value) * int(item.quantity) for item in line_items),
        ZERO,
    )
    discount = to_cents(discount_total)
    net = max(ZERO, item_total - discount)
    return OrderTotals(item_total=to_cents(item_total), discount=discount, net=to_cents(net))


def parse_client_amount(amount: Any) -> Decimal:
    number = to_decimal(amount)
    if number is None or number <= 0:
        raise OrderValidationError("Invalid amount")
    return number


def parse_currency(currency: Any, default: str) -> str:
    if currency is None or currency == "":
        return default
    if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha():
        raise OrderValidationError("Invalid currency")
    return currency.upper()


def parse_user_id(user_id: Any) -> str:
    if not user_id or not isinstance(user_id, str):
        raise OrderValidationError("Missing userId")
    return user_id


def new_invoice_id() -> str:
    return f"INV-{int(time.time() * 1000)}-{random.randrange(10000)}"


@dataclass
class ReconciledOrder:
    """Result of a successful reconciliation"""
    payload: OrderPayload
    totals: OrderTotals
    client_amount: Decimal

    @property
    def purchase_unit(self) -> PurchaseUnit:
        return self.payload.purchase_units[0]


class OrderBuilder:
    """
    Builds processor order payloads from storefront checkout requests.

    Usage:
        builder = OrderBuilder.from_settings(settings)
        order = builder.build(OrderCreateRequest(amount="8.00", userId="u1", items=[...]))
        await client.create_order(order.payload.to_request())
    """

    def __init__(
        self,
        public_base_url: str,
        brand_name: str = "Your Store",
        default_currency: str = "EUR",
        min_order_total: float = 0.01,
        amount_tolerance: float = 0.01,
        uid_line_item: bool = False,
    ):
        self.public_base_url = public_base_url.rstrip("/")
        self.brand_name = brand_name
        self.default_currency = default_currency
        self.min_order_total = Decimal(str(min_order_total))
        self.amount_tolerance = Decimal(str(amount_tolerance))
        self.uid_line_item = uid_line_item

    @classmethod
    def from_settings(cls, settings) -> "OrderBuilder":
        return cls(
            public_base_url=settings.public_base_url,
            brand_name=settings.brand_name,
            default_currency=settings.paypal_currency,
            min_order_total=settings.min_order_total,
            amount_tolerance=settings.amount_tolerance,
            uid_line_item=settings.paypal_uid_line_item,
        )

    def build(self, request: OrderCreateRequest) -> ReconciledOrder:
        """
        Validate a checkout request and produce the order payload.

        Raises:
            OrderValidationError: bad amount or currency, missing user id, or a net
                total under the configured minimum
            AmountMismatchError: declared amount and recomputed net differ
                by more than the tolerance
        """
        client_amount = parse_client_amount(request.amount)
        user_id = parse_user_id(request.user_id)
        currency = parse_currency(request.currency, self.default_currency)

        normalized = normalize_items(request.items, currency)
        totals = compute_totals(normalized.line_items, normalized.discount_total)

        if abs(totals.net - client_amount) > self.amount_tolerance:
            logger.warning(
                f"Client/server amount mismatch for user {user_id}: "
                f"client={format_amount(client_amount)} computed={format_amount(totals.net)}"
            )
            raise AmountMismatchError(
                client_amount=format_amount(client_amount),
                computed_net=format_amount(totals.net),
            )

        if totals.net < self.min_order_total:
            raise OrderValidationError(
                "Order total below minimum",
                detail={
                    "computedNet": format_amount(totals.net),
                    "minimum": format_amount(self.min_order_total),
                },
            )

        line_items = list(normalized.line_items)
        if self.uid_line_item:
            line_items.append(self._uid_line_item(user_id, currency))

        breakdown = AmountBreakdown(
            item_total=Money(currency_code=currency, value=format_amount(totals.item_total)),
        )
        if totals.discount > 0:
            breakdown.discount = Money(currency_code=currency, value=format_amount(totals.discount))

        unit = PurchaseUnit(
            custom_id=user_id[:MAX_TEXT_LENGTH],
            invoice_id=new_invoice_id(),
            amount=PurchaseAmount(
                currency_code=currency,
                value=format_amount(totals.net),
                breakdown=breakdown,
            ),
            items=line_items,
        )

        payload = OrderPayload(
            purchase_units=[unit],
            application_context=ApplicationContext(
                brand_name=self.brand_name,
                return_url=f"{self.public_base_url}/paypal/return",
                cancel_url=f"{self.public_base_url}/paypal/cancel",
            ),
        )

        return ReconciledOrder(payload=payload, totals=totals, client_amount=client_amount)

    def _uid_line_item(self, user_id: str, currency: str) -> OrderLineItem:
        """Zero-value bookkeeping line that tags the order with the buyer"""
        return OrderLineItem(
            name="Account",
            sku=_text(f"UID-{user_id}"),
            quantity="1",
            description=_text(f"User {user_id}"),
            unit_amount=Money(currency_code=currency, value="0.00"),
        )
