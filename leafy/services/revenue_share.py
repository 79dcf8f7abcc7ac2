"""
Revenue share rent calculation.

The café's lease charges the greater of a fixed minimum guarantee and a
percentage of the month's revenue.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from leafy.core.clock import month_bounds, month_label
from leafy.db.row_store import RowStore
from leafy.models.finance import DailyRevenue
from leafy.services.app_settings import (
    AppSettingsService,
    MINIMUM_GUARANTEE_RENT,
    REVENUE_SHARE_PERCENT,
)

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_GUARANTEE = Decimal("18000")
DEFAULT_REVENUE_SHARE_PERCENT = Decimal("20")

REVENUE_SHARE = "Revenue Share"
MINIMUM_GUARANTEE = "Minimum Guarantee"


@dataclass
class RevenueShareResult:
    """Effective rent for one month."""
    month: str  # YYYY-MM
    total_monthly_revenue: Decimal
    revenue_share_amount: Decimal
    minimum_guarantee: Decimal
    effective_rent: Decimal
    rent_type: str  # "Revenue Share" or "Minimum Guarantee"
    revenue_share_percent: Decimal
    break_even_revenue: Decimal


def _to_decimal(value: Any, default: Decimal, key: str) -> Decimal:
    if value is None or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning(f"Setting {key!r} is not numeric ({value!r}); using default {default}")
        return default
    if not result.is_finite():
        logger.warning(f"Setting {key!r} is not a finite number ({value!r}); using default {default}")
        return default
    return result


class RevenueShareCalculator:
    """
    Computes effective monthly rent.

    Formula:
    revenue_share_amount = total_monthly_revenue × pct / 100
    effective_rent = max(revenue_share_amount, minimum_guarantee)
    break_even_revenue = minimum_guarantee / (pct / 100)

    A tie goes to "Revenue Share".
    """

    def __init__(self, store: RowStore):
        self.store = store
        self.settings = AppSettingsService(store)

    def calculate(self, year: int, month_index: int) -> RevenueShareResult:
        """
        Args:
            year: Calendar year
            month_index: Zero-based month (0 = January)

        Raises:
            RowStoreError: the revenue query failed
        """
        start, end = month_bounds(year, month_index)
        records = self.store.select(
            DailyRevenue,
            DailyRevenue.date >= start,
            DailyRevenue.date <= end,
        )
        total_revenue = sum((r.total_sales for r in records), Decimal("0"))

        minimum_guarantee = _to_decimal(
            self.settings.get(MINIMUM_GUARANTEE_RENT),
            DEFAULT_MINIMUM_GUARANTEE,
            MINIMUM_GUARANTEE_RENT,
        )
        share_percent = _to_decimal(
            self.settings.get(REVENUE_SHARE_PERCENT),
            DEFAULT_REVENUE_SHARE_PERCENT,
            REVENUE_SHARE_PERCENT,
        )
        if share_percent <= 0:
            logger.warning(f"{REVENUE_SHARE_PERCENT} must be positive (got {share_percent}); using default")
            share_percent = DEFAULT_REVENUE_SHARE_PERCENT

        share_amount = total_revenue * share_percent / Decimal("100")
        effective_rent = max(share_amount, minimum_guarantee)
        rent_type = REVENUE_SHARE if share_amount >= minimum_guarantee else MINIMUM_GUARANTEE

        return RevenueShareResult(
            month=month_label(year, month_index),
            total_monthly_revenue=total_revenue,
            revenue_share_amount=share_amount,
            minimum_guarantee=minimum_guarantee,
            effective_rent=effective_rent,
            rent_type=rent_type,
            revenue_share_percent=share_percent,
            break_even_revenue=minimum_guarantee / (share_percent / Decimal("100")),
        )
