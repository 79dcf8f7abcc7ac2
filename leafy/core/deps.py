"""
Shared FastAPI dependencies.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from leafy.db.row_store import RowStore
from leafy.db.session import get_db


def get_store(db: Session = Depends(get_db)) -> RowStore:
    """Row store bound to the request's session."""
    return RowStore(db)
