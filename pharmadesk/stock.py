"""
Stock State - derive a medicine's stock status from its quantity

One threshold table is used everywhere:
    0        -> out_of_stock
    1..5     -> critical
    6..20    -> low_stock
    > 20     -> in_stock
"""
import enum
import math
from typing import Callable, Dict, Optional


class StockStatus(str, enum.Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    CRITICAL = "critical"
    OUT_OF_STOCK = "out_of_stock"


CRITICAL_THRESHOLD = 5
LOW_STOCK_THRESHOLD = 20

# Statuses reported by the low-stock view
LOW_STOCK_STATUSES = (StockStatus.LOW_STOCK, StockStatus.CRITICAL)

# Entering one of these raises a low_stock notification
ALERT_STATUSES = (StockStatus.CRITICAL, StockStatus.OUT_OF_STOCK)


def derive_status(quantity: int) -> StockStatus:
    if quantity < 0:
        raise ValueError(f"Stock quantity cannot be negative: {quantity}")
    if quantity == 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= CRITICAL_THRESHOLD:
        return StockStatus.CRITICAL
    if quantity <= LOW_STOCK_THRESHOLD:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def crossed_into_alert(old_status: Optional[str], new_status: str) -> bool:
    """True when a change moves a medicine INTO critical or out_of_stock."""
    return new_status != old_status and new_status in {s.value for s in ALERT_STATUSES}


# ===================== MEDICINE KINDS =====================

class MedicineKind(str, enum.Enum):
    OTC = "otc"
    PRESCRIPTION = "prescription"
    ANTIBIOTIC = "antibiotic"
    PAINKILLER = "painkiller"


def is_controlled(kind: str, category: str) -> bool:
    """Painkillers in an opioid or narcotic category are controlled."""
    if kind != MedicineKind.PAINKILLER.value:
        return False
    category = (category or "").lower()
    return "opioid" in category or "narcotic" in category


def _reorder_prescription(quantity: int, category: str) -> int:
    return max(20, math.ceil(quantity * 0.5))


def _reorder_otc(quantity: int, category: str) -> int:
    # Higher demand, larger batches
    return max(50, quantity)


def _reorder_antibiotic(quantity: int, category: str) -> int:
    return max(15, math.ceil(quantity * 0.3))


def _reorder_painkiller(quantity: int, category: str) -> int:
    if is_controlled(MedicineKind.PAINKILLER.value, category):
        return max(10, math.ceil(quantity * 0.2))
    return max(30, quantity)


REORDER_RULES: Dict[str, Callable[[int, str], int]] = {
    MedicineKind.PRESCRIPTION.value: _reorder_prescription,
    MedicineKind.OTC.value: _reorder_otc,
    MedicineKind.ANTIBIOTIC.value: _reorder_antibiotic,
    MedicineKind.PAINKILLER.value: _reorder_painkiller,
}


def reorder_quantity(kind: str, quantity: int, category: str = "") -> int:
    """Suggested quantity to order for a medicine of the given kind."""
    rule = REORDER_RULES.get(kind, _reorder_prescription)
    return rule(quantity, category)
