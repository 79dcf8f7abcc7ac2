"""
App settings endpoints.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.task import SettingResponse, SettingValue
from leafy.services.app_settings import AppSettingsService

router = APIRouter(prefix="/api/settings", tags=["settings"])

# Distinguishes "missing" from a stored null
_MISSING = object()


@router.get("", response_model=Dict[str, Any])
def list_settings(store: RowStore = Depends(get_store)):
    """All settings, JSON-decoded."""
    return AppSettingsService(store).all()


@router.get("/{key}", response_model=SettingResponse)
def get_setting(key: str, store: RowStore = Depends(get_store)):
    value = AppSettingsService(store).get(key, _MISSING)
    if value is _MISSING:
        raise HTTPException(status_code=404, detail="Setting not found")
    return SettingResponse(key=key, value=value)


@router.put("/{key}", response_model=SettingResponse)
def put_setting(key: str, data: SettingValue, store: RowStore = Depends(get_store)):
    """Create or replace a setting."""
    AppSettingsService(store).set(key, data.value)
    return SettingResponse(key=key, value=data.value)
