"""
Orders router: checkout, order history, Excel export and the deduction outbox.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from leafy.core.deps import get_store
from leafy.db.row_store import RowStore
from leafy.schemas.order import (
    OrderListResponse,
    OutboxEntryResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    RetryDeductionsResponse,
)
from leafy.services.order_export import XLSX_MEDIA_TYPE, OrderExportService
from leafy.services.orders import OrderPlacementService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=PlaceOrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(request: PlaceOrderRequest, store: RowStore = Depends(get_store)):
    """
    Place an order.

    The order and the day's revenue rollup are stored together. Stock is
    deducted afterwards; if that fails the order still succeeds and the
    deduction is queued for retry.
    """
    placed = OrderPlacementService(store).place_order(request)
    return PlaceOrderResponse(id=placed.id, order_number=placed.order_number)


@router.get("", response_model=OrderListResponse)
def list_orders(date: Optional[date] = None, store: RowStore = Depends(get_store)):
    """List orders, newest first. Filter to one day with ?date=YYYY-MM-DD."""
    orders = OrderPlacementService(store).list_orders(date)
    return OrderListResponse(orders=orders, total=len(orders))


@router.get("/export")
def export_orders(start: date, end: Optional[date] = None, store: RowStore = Depends(get_store)):
    """Download orders between start and end (inclusive) as an .xlsx workbook."""
    try:
        export = OrderExportService(store).export(start, end)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return Response(
        content=export.content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/deductions/pending", response_model=List[OutboxEntryResponse])
def pending_deductions(store: RowStore = Depends(get_store)):
    """Inventory deductions that failed and are waiting for a retry."""
    return OrderPlacementService(store).pending_deductions()


@router.post("/deductions/retry", response_model=RetryDeductionsResponse)
def retry_deductions(store: RowStore = Depends(get_store)):
    result = OrderPlacementService(store).retry_pending_deductions()
    return RetryDeductionsResponse(applied=result.applied, still_pending=result.still_pending)
