"""
Global key/value settings stored as JSON-encoded strings.
"""
import json
import logging
from typing import Any

from leafy.db.row_store import RowStore
from leafy.models.settings import AppSetting

logger = logging.getLogger(__name__)

MINIMUM_GUARANTEE_RENT = "minimumGuaranteeRent"
REVENUE_SHARE_PERCENT = "revenueSharePercent"

DEFAULT_SETTINGS: dict[str, Any] = {
    "businessName": "Leafy Life",
    "securityDeposit": 100000,
    MINIMUM_GUARANTEE_RENT: 18000,
    REVENUE_SHARE_PERCENT: 20,
    "currency": "INR",
    "orderNumberPrefix": "LL",
}


class AppSettingsService:
    """Read and write AppSettings rows."""

    def __init__(self, store: RowStore):
        self.store = store

    def get(self, key: str, default: Any = None) -> Any:
        """
        Decoded value for ``key``.

        Missing keys and values that are not valid JSON return ``default``;
        neither is an error.
        """
        row = self.store.first(AppSetting, AppSetting.key == key)
        if row is None:
            return default
        try:
            return json.loads(row.value)
        except (TypeError, ValueError):
            logger.warning(f"Setting {key!r} holds invalid JSON {row.value!r}; using default {default!r}")
            return default

    def set(self, key: str, value: Any) -> AppSetting:
        """Store ``value`` JSON-encoded, creating the key if needed."""
        encoded = json.dumps(value)
        with self.store.transaction():
            updated = self.store.update(AppSetting, {"value": encoded}, AppSetting.key == key)
            if not updated:
                self.store.insert(AppSetting, [{"key": key, "value": encoded}])
        return self.store.first(AppSetting, AppSetting.key == key)

    def all(self) -> dict[str, Any]:
        result = {}
        for row in self.store.select(AppSetting, order_by=AppSetting.key):
            try:
                result[row.key] = json.loads(row.value)
            except (TypeError, ValueError):
                result[row.key] = row.value
        return result
