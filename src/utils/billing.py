# src/utils/billing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
from uuid import uuid4
from models.invoice import InvoiceStatus
from utils.scheduling import normalize_date, today_str

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def item_total(quantity: Number, unit_price: Number) -> Decimal:
    return to_money(Decimal(str(quantity)) * to_money(unit_price))


def _get(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def price_items(items: Iterable[Any]) -> List[Dict[str, Any]]:
    """Stored form of invoice lines with their totals recomputed.

    Amounts are kept as strings so the JSON column round-trips them exactly.
    """
    priced = []
    for item in items:
        quantity = int(_get(item, "quantity", 1))
        unit_price = to_money(_get(item, "unit_price"))
        treatment_id = _get(item, "treatment_id")
        priced.append(
            {
                "id": str(_get(item, "id") or uuid4()),
                "description": _get(item, "description"),
                "quantity": quantity,
                "unit_price": str(unit_price),
                "total": str(item_total(quantity, unit_price)),
                "treatment_id": str(treatment_id) if treatment_id else None,
            }
        )
    return priced


def compute_totals(
    items: Iterable[Any], tax: Optional[Number] = 0, discount: Optional[Number] = 0
) -> Tuple[List[Dict[str, Any]], Decimal, Decimal]:
    """Return (priced items, subtotal, total) with total = subtotal + tax - discount"""
    priced = price_items(items)
    subtotal = to_money(sum((Decimal(line["total"]) for line in priced), Decimal("0")))
    total = to_money(subtotal + to_money(tax) - to_money(discount))
    return priced, subtotal, total


def is_overdue(
    status: Union[InvoiceStatus, str], due_date: Optional[str], today: Optional[str] = None
) -> bool:
    """Past its due date and not settled or voided"""
    if not due_date:
        return False
    if InvoiceStatus(status) in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
        return False
    reference = normalize_date(today) if today else today_str()
    return normalize_date(due_date) < reference
