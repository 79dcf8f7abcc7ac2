"""
Alert lifecycle and alert rule management.
"""
import logging
from typing import Optional

from pydantic import ValidationError

from leafy.core.errors import NotFoundError
from leafy.db.base import utcnow
from leafy.db.row_store import RowStore
from leafy.models.alert import Alert, AlertRule
from leafy.schemas.alert import AlertRuleCreate, AlertRuleUpdate, dump_rule_parameters, parse_rule_parameters

logger = logging.getLogger(__name__)


class AlertService:
    """Read, resolve and dismiss alerts."""

    def __init__(self, store: RowStore):
        self.store = store

    def list_alerts(self, include_resolved: bool = False) -> list[Alert]:
        criteria = [] if include_resolved else [Alert.resolved_at.is_(None)]
        return self.store.select(Alert, *criteria, order_by=Alert.created_at.desc())

    def unread_count(self) -> int:
        return self.store.count(Alert, Alert.resolved_at.is_(None), Alert.is_read.is_(False))

    def mark_read(self, alert_id: str) -> Alert:
        self._require(alert_id)
        self.store.update(Alert, {"is_read": True}, Alert.id == alert_id)
        return self.store.get(Alert, alert_id)

    def resolve_alert(self, alert_id: str) -> Alert:
        """Close an alert. Resolving an already resolved alert keeps its first resolved_at."""
        alert = self._require(alert_id)
        if alert.resolved_at is None:
            self.store.update(Alert, {"resolved_at": utcnow(), "is_read": True}, Alert.id == alert_id)
        return self.store.get(Alert, alert_id)

    def dismiss_all(self) -> int:
        """Resolve and mark read every open alert. Returns how many were dismissed."""
        dismissed = self.store.update(
            Alert,
            {"resolved_at": utcnow(), "is_read": True},
            Alert.resolved_at.is_(None),
        )
        logger.info(f"Dismissed {dismissed} open alerts")
        return dismissed

    def delete_alert(self, alert_id: str) -> None:
        self._require(alert_id)
        self.store.delete(Alert, Alert.id == alert_id)

    def _require(self, alert_id: str) -> Alert:
        alert = self.store.get(Alert, alert_id)
        if alert is None:
            raise NotFoundError("Alert", alert_id)
        return alert


class AlertRuleService:
    """CRUD for alert rules. Parameters are validated against the rule's condition on every write."""

    def __init__(self, store: RowStore):
        self.store = store

    def list_rules(self, active_only: bool = False) -> list[AlertRule]:
        criteria = [AlertRule.is_active.is_(True)] if active_only else []
        return self.store.select(AlertRule, *criteria, order_by=AlertRule.created_at)

    def create_rule(self, data: AlertRuleCreate) -> AlertRule:
        rule = self.store.insert(AlertRule, [data.model_dump()])[0]
        logger.info(f"Created alert rule {data.name!r} ({data.condition})")
        return self.store.get(AlertRule, rule.id)

    def update_rule(self, rule_id: str, data: AlertRuleUpdate) -> AlertRule:
        """
        Apply a partial update.

        Raises:
            NotFoundError: no rule with this id
            ValueError: the resulting condition/parameters pair does not validate
        """
        rule = self.store.get(AlertRule, rule_id)
        if rule is None:
            raise NotFoundError("AlertRule", rule_id)

        patch = data.model_dump(exclude_unset=True)
        if "condition" in patch or "parameters" in patch:
            condition = patch.get("condition") or rule.condition
            parameters = patch["parameters"] if patch.get("parameters") is not None else rule.parameters
            try:
                parsed = parse_rule_parameters(condition, parameters)
            except ValidationError as e:
                raise ValueError(f"Invalid parameters for {condition}: {e.errors(include_url=False)}") from e
            patch["condition"] = condition
            patch["parameters"] = dump_rule_parameters(parsed)

        if patch:
            self.store.update(AlertRule, patch, AlertRule.id == rule_id)
        return self.store.get(AlertRule, rule_id)

    def delete_rule(self, rule_id: str) -> None:
        if not self.store.delete(AlertRule, AlertRule.id == rule_id):
            raise NotFoundError("AlertRule", rule_id)

    def get_rule(self, rule_id: str) -> Optional[AlertRule]:
        return self.store.get(AlertRule, rule_id)
