"""
Alert Rule Engine.

One sweep evaluates every active AlertRule against current data, collects
candidate alerts, drops those that duplicate an open alert, and inserts the
rest. Sweeps are stateless; running one twice with no data change inserts
nothing the second time.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from leafy.core.clock import local_today, month_bounds
from leafy.db.base import utcnow
from leafy.db.row_store import RowStore
from leafy.models.alert import Alert, AlertRule
from leafy.models.finance import DailyRevenue, Expense
from leafy.models.ingredient import Ingredient
from leafy.models.task import Task
from leafy.schemas.alert import (
    DailyRevenueAboveParams,
    DailyRevenueBelowParams,
    ExpenseBudgetParams,
    ExpiryWithinDaysParams,
    MonthlyRentDueParams,
    StockBelowThresholdParams,
    TaskOverdueParams,
    parse_rule_parameters,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def format_amount(value) -> str:
    """
    Amount with Indian digit grouping, no trailing zero paise.

    Examples:
        >>> format_amount(Decimal("1234567.50"))
        '12,34,567.5'
    """
    value = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):.2f}".partition(".")

    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ",".join(groups + [tail])

    fraction = fraction.rstrip("0")
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_quantity(value) -> str:
    return format(Decimal(str(value)).normalize(), "f")


@dataclass
class AlertCandidate:
    """An alert a rule wants to raise, before deduplication."""
    rule_id: str
    type: str
    severity: str
    title: str
    description: str
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None

    @property
    def dedup_key(self) -> tuple:
        return (self.type, self.related_entity_id, self.title)

    def to_row(self) -> dict:
        return {
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
            "related_entity_id": self.related_entity_id,
            "related_entity_type": self.related_entity_type,
            "is_read": False,
        }


class AlertEngine:
    """
    Evaluates alert rules.

    Each rule is checked on its own: a rule whose parameters no longer
    validate, or whose query fails, is logged and the sweep moves on.
    Candidates are deduplicated on (type, related_entity_id, title) against
    open alerts and against each other.
    """

    def __init__(self, store: RowStore, cafe_timezone: Optional[str] = None):
        self.store = store
        self.cafe_timezone = cafe_timezone
        self._checks = {
            "stock_below_threshold": self.check_low_stock,
            "monthly_rent_due": self.check_rent_due,
            "daily_revenue_below": self.check_low_revenue,
            "daily_revenue_above": self.check_high_revenue,
            "expense_exceeds_budget": self.check_expense_budget,
            "expiry_within_days": self.check_expiring_ingredients,
            "task_overdue": self.check_overdue_tasks,
        }

    def run(self, today: Optional[date] = None) -> int:
        """
        Run one sweep.

        Args:
            today: Date to evaluate as "today". Defaults to the café-local date.

        Returns:
            Number of alerts inserted
        """
        today = today or local_today(self.cafe_timezone)
        rules = self.store.select(AlertRule, AlertRule.is_active.is_(True), order_by=AlertRule.created_at)

        candidates: list[AlertCandidate] = []
        for rule in rules:
            try:
                params = parse_rule_parameters(rule.condition, rule.parameters)
                candidates.extend(self._checks[rule.condition](rule.id, params, today))
            except Exception:
                logger.exception(f"Alert rule {rule.name!r} ({rule.condition}) failed; skipping")

        survivors = self._deduplicate(candidates)
        if not survivors:
            logger.debug(f"Alert sweep for {today}: {len(candidates)} candidates, nothing new")
            return 0

        triggered_rules = {c.rule_id for c in survivors}
        with self.store.transaction():
            self.store.insert(Alert, [c.to_row() for c in survivors])
            self.store.update(AlertRule, {"last_triggered": utcnow()}, AlertRule.id.in_(triggered_rules))

        logger.info(f"Alert sweep for {today}: inserted {len(survivors)} of {len(candidates)} candidates")
        return len(survivors)

    def _deduplicate(self, candidates: list[AlertCandidate]) -> list[AlertCandidate]:
        if not candidates:
            return []
        open_alerts = self.store.select(Alert, Alert.resolved_at.is_(None))
        seen = {(a.type, a.related_entity_id, a.title) for a in open_alerts}

        survivors = []
        for candidate in candidates:
            if candidate.dedup_key in seen:
                continue
            seen.add(candidate.dedup_key)
            survivors.append(candidate)
        return survivors

    # ----- checks -----

    def check_low_stock(
        self, rule_id: str, params: StockBelowThresholdParams, today: date
    ) -> list[AlertCandidate]:
        alerts = []
        for ing in self.store.select(Ingredient, order_by=Ingredient.name):
            stock, threshold = ing.current_stock, ing.minimum_threshold
            if stock > threshold:
                continue
            if stock == 0:
                severity = "critical"
            elif stock <= threshold * Decimal("0.5"):
                severity = "high"
            else:
                severity = "medium"
            alerts.append(AlertCandidate(
                rule_id=rule_id,
                type="LowStock",
                severity=severity,
                title=f"Low Stock: {ing.name}",
                description=(
                    f"{ing.name} is at {format_quantity(stock)} {ing.unit} "
                    f"(threshold: {format_quantity(threshold)} {ing.unit})"
                ),
                related_entity_id=ing.id,
                related_entity_type="ingredient",
            ))
        return alerts

    def check_rent_due(
        self, rule_id: str, params: MonthlyRentDueParams, today: date
    ) -> list[AlertCandidate]:
        # A due day past the end of a short month means its last day
        due_day = min(params.day_of_month, calendar.monthrange(today.year, today.month)[1])
        if today.day > due_day:
            return []

        days_until_due = due_day - today.day
        if days_until_due > params.reminder_days_before:
            return []

        return [AlertCandidate(
            rule_id=rule_id,
            type="RentDue",
            severity="high" if days_until_due == 0 else "medium",
            title="Rent Payment Due",
            description=(
                "Rent payment is due today!"
                if days_until_due == 0
                else f"Rent payment is due in {days_until_due} day(s)"
            ),
        )]

    def check_low_revenue(
        self, rule_id: str, params: DailyRevenueBelowParams, today: date
    ) -> list[AlertCandidate]:
        threshold = Decimal(str(params.amount))
        record = self.store.first(DailyRevenue, DailyRevenue.date == today - timedelta(days=1))
        if record is None or record.total_sales >= threshold:
            return []

        return [AlertCandidate(
            rule_id=rule_id,
            type="RevenueThreshold",
            severity="high" if record.total_sales < threshold * Decimal("0.5") else "medium",
            title="Low Revenue Alert",
            description=(
                f"Yesterday's revenue was Rs {format_amount(record.total_sales)} "
                f"(below Rs {format_amount(threshold)})"
            ),
        )]

    def check_high_revenue(
        self, rule_id: str, params: DailyRevenueAboveParams, today: date
    ) -> list[AlertCandidate]:
        threshold = Decimal(str(params.amount))
        record = self.store.first(DailyRevenue, DailyRevenue.date == today - timedelta(days=1))
        if record is None or record.total_sales <= threshold:
            return []

        return [AlertCandidate(
            rule_id=rule_id,
            type="RevenueThreshold",
            severity="low",
            title="Great Revenue Day!",
            description=(
                f"Yesterday's revenue was Rs {format_amount(record.total_sales)} "
                f"- above Rs {format_amount(threshold)} target"
            ),
        )]

    def check_expense_budget(
        self, rule_id: str, params: ExpenseBudgetParams, today: date
    ) -> list[AlertCandidate]:
        budget = Decimal(str(params.monthly_budget))
        start, end = month_bounds(today.year, today.month - 1)
        expenses = self.store.select(Expense, Expense.date >= start, Expense.date <= end)
        total = sum((e.amount for e in expenses), ZERO)

        if total > budget:
            return [AlertCandidate(
                rule_id=rule_id,
                type="HighExpense",
                severity="critical" if total > budget * Decimal("1.2") else "high",
                title="Monthly Expense Budget Exceeded",
                description=f"Total expenses: Rs {format_amount(total)} (budget: Rs {format_amount(budget)})",
            )]

        if total > budget * Decimal("0.8"):
            percent = (total / budget * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            return [AlertCandidate(
                rule_id=rule_id,
                type="HighExpense",
                severity="medium",
                title="Approaching Expense Budget",
                description=f"Total expenses: Rs {format_amount(total)} ({percent}% of budget)",
            )]

        return []

    def check_expiring_ingredients(
        self, rule_id: str, params: ExpiryWithinDaysParams, today: date
    ) -> list[AlertCandidate]:
        alerts = []
        ingredients = self.store.select(Ingredient, Ingredient.expiry_date.isnot(None), order_by=Ingredient.name)
        for ing in ingredients:
            days_left = (ing.expiry_date - today).days
            if days_left < 0:
                alerts.append(AlertCandidate(
                    rule_id=rule_id,
                    type="ExpiryWarning",
                    severity="critical",
                    title=f"Expired: {ing.name}",
                    description=f"{ing.name} expired {-days_left} day(s) ago",
                    related_entity_id=ing.id,
                    related_entity_type="ingredient",
                ))
            elif days_left <= params.days:
                alerts.append(AlertCandidate(
                    rule_id=rule_id,
                    type="ExpiryWarning",
                    severity="high" if days_left <= 1 else "medium",
                    title=f"Expiring Soon: {ing.name}",
                    description=f"{ing.name} expires in {days_left} day(s)",
                    related_entity_id=ing.id,
                    related_entity_type="ingredient",
                ))
        return alerts

    def check_overdue_tasks(
        self, rule_id: str, params: TaskOverdueParams, today: date
    ) -> list[AlertCandidate]:
        alerts = []
        tasks = self.store.select(
            Task,
            Task.status != "completed",
            Task.due_date.isnot(None),
            order_by=Task.due_date,
        )
        for task in tasks:
            if task.due_date < today:
                days_overdue = (today - task.due_date).days
                if task.priority == "urgent" or days_overdue > 3:
                    severity = "critical"
                elif task.priority == "high" or days_overdue > 1:
                    severity = "high"
                else:
                    severity = "medium"
                alerts.append(AlertCandidate(
                    rule_id=rule_id,
                    type="TaskDue",
                    severity=severity,
                    title=f"Overdue: {task.title}",
                    description=f'Task "{task.title}" was due {days_overdue} day(s) ago ({task.priority} priority)',
                    related_entity_id=task.id,
                    related_entity_type="task",
                ))
            elif task.due_date == today:
                alerts.append(AlertCandidate(
                    rule_id=rule_id,
                    type="TaskDue",
                    severity="high" if task.priority == "urgent" else "low",
                    title=f"Due Today: {task.title}",
                    description=f'Task "{task.title}" is due today ({task.priority} priority)',
                    related_entity_id=task.id,
                    related_entity_type="task",
                ))
        return alerts
