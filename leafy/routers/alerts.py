"""
Alerts router: alert lifecycle, on-demand sweeps and alert rule management.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.alert import (
    AlertListResponse,
    AlertResponse,
    AlertRuleCreate,
    AlertRuleResponse,
    AlertRuleUpdate,
    AlertSweepResponse,
    DismissAllResponse,
)
from leafy.services.alert_engine import AlertEngine
from leafy.services.alerts import AlertRuleService, AlertService

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("", response_model=AlertListResponse)
def list_alerts(include_resolved: bool = False, store: RowStore = Depends(get_store)):
    """Open alerts, newest first, with the unread count."""
    service = AlertService(store)
    return AlertListResponse(
        alerts=service.list_alerts(include_resolved),
        unread_count=service.unread_count(),
    )


@router.post("/run", response_model=AlertSweepResponse)
def run_alert_sweep(store: RowStore = Depends(get_store)):
    """Evaluate all active rules now."""
    return AlertSweepResponse(inserted=AlertEngine(store).run())


@router.post("/dismiss-all", response_model=DismissAllResponse)
def dismiss_all(store: RowStore = Depends(get_store)):
    return DismissAllResponse(dismissed=AlertService(store).dismiss_all())


# ============ Rules ============

@router.get("/rules", response_model=List[AlertRuleResponse])
def list_rules(active_only: bool = False, store: RowStore = Depends(get_store)):
    return AlertRuleService(store).list_rules(active_only)


@router.post("/rules", response_model=AlertRuleResponse, status_code=status.HTTP_201_CREATED)
def create_rule(data: AlertRuleCreate, store: RowStore = Depends(get_store)):
    """Create a rule. Parameters must match the rule's condition."""
    return AlertRuleService(store).create_rule(data)


@router.patch("/rules/{rule_id}", response_model=AlertRuleResponse)
def update_rule(rule_id: str, data: AlertRuleUpdate, store: RowStore = Depends(get_store)):
    try:
        return AlertRuleService(store).update_rule(rule_id, data)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.delete("/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_rule(rule_id: str, store: RowStore = Depends(get_store)):
    AlertRuleService(store).delete_rule(rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============ Single alert ============

@router.post("/{alert_id}/read", response_model=AlertResponse)
def mark_read(alert_id: str, store: RowStore = Depends(get_store)):
    return AlertService(store).mark_read(alert_id)


@router.post("/{alert_id}/resolve", response_model=AlertResponse)
def resolve_alert(alert_id: str, store: RowStore = Depends(get_store)):
    return AlertService(store).resolve_alert(alert_id)


@router.delete("/{alert_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_alert(alert_id: str, store: RowStore = Depends(get_store)):
    AlertService(store).delete_alert(alert_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
