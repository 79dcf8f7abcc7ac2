"""
Alert and alert rule schemas.

Rule parameters are a tagged union keyed by ``condition``: each variant
carries only the typed parameters its check reads. Stored parameter keys
keep their camelCase names (``dayOfMonth``, ``monthlyBudget``, ...).
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

AlertType = Literal["LowStock", "RentDue", "RevenueThreshold", "HighExpense", "ExpiryWarning", "TaskDue", "Custom"]
AlertSeverity = Literal["low", "medium", "high", "critical"]
RuleCondition = Literal[
    "stock_below_threshold",
    "monthly_rent_due",
    "daily_revenue_below",
    "daily_revenue_above",
    "expense_exceeds_budget",
    "expiry_within_days",
    "task_overdue",
]


class _RuleParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)


class StockBelowThresholdParams(_RuleParams):
    condition: Literal["stock_below_threshold"] = "stock_below_threshold"


class MonthlyRentDueParams(_RuleParams):
    condition: Literal["monthly_rent_due"] = "monthly_rent_due"
    day_of_month: int = Field(default=1, ge=1, le=31, alias="dayOfMonth")
    reminder_days_before: int = Field(default=3, ge=0, le=31, alias="reminderDaysBefore")


class DailyRevenueBelowParams(_RuleParams):
    condition: Literal["daily_revenue_below"] = "daily_revenue_below"
    amount: float = Field(gt=0)


class DailyRevenueAboveParams(_RuleParams):
    condition: Literal["daily_revenue_above"] = "daily_revenue_above"
    amount: float = Field(gt=0)


class ExpenseBudgetParams(_RuleParams):
    condition: Literal["expense_exceeds_budget"] = "expense_exceeds_budget"
    monthly_budget: float = Field(gt=0, alias="monthlyBudget")


class ExpiryWithinDaysParams(_RuleParams):
    condition: Literal["expiry_within_days"] = "expiry_within_days"
    days: int = Field(default=3, ge=0)


class TaskOverdueParams(_RuleParams):
    condition: Literal["task_overdue"] = "task_overdue"


RuleParameters = Annotated[
    Union[
        StockBelowThresholdParams,
        MonthlyRentDueParams,
        DailyRevenueBelowParams,
        DailyRevenueAboveParams,
        ExpenseBudgetParams,
        ExpiryWithinDaysParams,
        TaskOverdueParams,
    ],
    Field(discriminator="condition"),
]

_rule_parameters = TypeAdapter(RuleParameters)


def parse_rule_parameters(condition: str, parameters: Optional[Dict[str, Any]]) -> RuleParameters:
    """
    Validate a stored parameter bag against its condition.

    Raises:
        pydantic.ValidationError: unknown condition, missing or invalid parameter
    """
    payload = dict(parameters or {})
    payload["condition"] = condition
    return _rule_parameters.validate_python(payload)


def dump_rule_parameters(params: RuleParameters) -> Dict[str, Any]:
    """Parameter bag as stored on the rule row (camelCase keys, no condition)."""
    return params.model_dump(by_alias=True, exclude={"condition"})


class AlertRuleCreate(BaseModel):
    """Request model for creating an alert rule. Parameters are checked here, not at sweep time."""
    name: str = Field(min_length=1)
    type: AlertType
    condition: RuleCondition
    parameters: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True

    @model_validator(mode="after")
    def normalize_parameters(self) -> "AlertRuleCreate":
        try:
            parsed = parse_rule_parameters(self.condition, self.parameters)
        except ValidationError as e:
            raise ValueError(f"Invalid parameters for {self.condition}: {e.errors(include_url=False)}") from e
        self.parameters = dump_rule_parameters(parsed)
        return self


class AlertRuleUpdate(BaseModel):
    """Partial update. Condition and parameters are re-validated together by the service."""
    name: Optional[str] = None
    type: Optional[AlertType] = None
    condition: Optional[RuleCondition] = None
    parameters: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None


class AlertRuleResponse(BaseModel):
    id: str
    name: str
    type: str
    condition: str
    parameters: Dict[str, Any]
    is_active: bool
    last_triggered: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlertResponse(BaseModel):
    id: str
    type: str
    severity: str
    title: str
    description: str
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    is_read: bool
    resolved_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlertListResponse(BaseModel):
    alerts: List[AlertResponse]
    unread_count: int


class AlertSweepResponse(BaseModel):
    inserted: int


class DismissAllResponse(BaseModel):
    dismissed: int
