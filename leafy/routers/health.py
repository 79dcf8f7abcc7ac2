"""
Health check router with database connectivity verification.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from leafy.db.session import get_db
from leafy.models.order import InventoryDeductionOutbox
from leafy.services.orders import OUTBOX_PENDING

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check - always returns OK."""
    return {"status": "ok"}


@router.get("/api/health")
def api_health_check(db: Session = Depends(get_db)):
    """
    Health check verifying database connectivity.

    Also reports how many inventory deductions are parked for retry; a
    backlog there is "degraded", not down.

    Returns 200 when the database answers, 503 otherwise.
    """
    health_status = {
        "status": "ok",
        "services": {}
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["services"]["database"] = {"status": "ok"}
    except Exception as e:
        health_status["services"]["database"] = {"status": "error", "message": str(e)}
        health_status["status"] = "unhealthy"
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=health_status
        )

    pending = db.execute(
        select(func.count())
        .select_from(InventoryDeductionOutbox)
        .where(InventoryDeductionOutbox.status == OUTBOX_PENDING)
    ).scalar_one()
    health_status["services"]["inventory_deductions"] = {
        "status": "degraded" if pending else "ok",
        "pending": pending,
    }

    return health_status
