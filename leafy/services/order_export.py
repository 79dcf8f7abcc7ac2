"""
Order export to Excel.

Orders are flattened to one row per line item on an "Orders" sheet, with
day totals on a "Summary" sheet.
"""
import io
import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import pandas as pd

from leafy.core.errors import NotFoundError
from leafy.db.row_store import RowStore
from leafy.models.order import Order

logger = logging.getLogger(__name__)

ORDER_COLUMNS = [
    "Order #",
    "Date",
    "Type",
    "Customer",
    "Phone",
    "Item",
    "Size",
    "Qty",
    "Unit Price",
    "Line Total",
    "Subtotal",
    "Discount",
    "Order Total",
    "Payment",
    "Created By",
]

ORDER_TYPE_LABELS = {
    "DineIn": "Dine In",
    "Takeaway": "Take Away",
    "Delivery": "Delivery",
}

MAX_COLUMN_WIDTH = 30
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class OrderExport:
    filename: str
    content: bytes
    order_count: int


def export_filename(start: date, end: date) -> str:
    if start == end:
        return f"Leafy-Orders-{start.isoformat()}.xlsx"
    return f"Leafy-Orders-{start.isoformat()}-to-{end.isoformat()}.xlsx"


def flatten_orders(orders: list[Order]) -> pd.DataFrame:
    """One row per order line, columns in ORDER_COLUMNS order."""
    rows = []
    for order in orders:
        for item in order.items or []:
            rows.append({
                "Order #": order.order_number,
                "Date": order.date.isoformat(),
                "Type": ORDER_TYPE_LABELS.get(order.order_type, order.order_type),
                "Customer": order.customer_name or "",
                "Phone": order.customer_phone or "",
                "Item": item.get("menu_item_name", ""),
                "Size": item.get("size", ""),
                "Qty": int(item.get("quantity", 0)),
                "Unit Price": float(item.get("unit_price", 0)),
                "Line Total": float(item.get("line_total", 0)),
                "Subtotal": float(order.subtotal),
                "Discount": float(order.discount),
                "Order Total": float(order.total_amount),
                "Payment": order.payment_method,
                "Created By": order.created_by or "",
            })
    return pd.DataFrame(rows, columns=ORDER_COLUMNS)


def summarize_orders(orders: list[Order], label: str) -> pd.DataFrame:
    total_sales = sum((o.total_amount for o in orders), Decimal("0"))
    total_discount = sum((o.discount for o in orders), Decimal("0"))

    def by_method(method: str) -> float:
        return float(sum((o.total_amount for o in orders if o.payment_method == method), Decimal("0")))

    average = (
        (total_sales / len(orders)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        if orders else Decimal("0")
    )

    return pd.DataFrame(
        [
            ("Date", label),
            ("Total Orders", len(orders)),
            ("Total Sales", float(total_sales)),
            ("Total Discount", float(total_discount)),
            ("Cash", by_method("Cash")),
            ("UPI", by_method("UPI")),
            ("Card", by_method("Card")),
            ("Avg Order Value", int(average)),
        ],
        columns=["Metric", "Value"],
    )


def _autosize(worksheet, df: pd.DataFrame) -> None:
    for idx, column in enumerate(df.columns, start=1):
        values = [str(column)] + [str(v) for v in df[column].tolist()]
        width = min(max(len(v) for v in values) + 2, MAX_COLUMN_WIDTH)
        worksheet.column_dimensions[worksheet.cell(row=1, column=idx).column_letter].width = width


class OrderExportService:
    def __init__(self, store: RowStore):
        self.store = store

    def export(self, start: date, end: Optional[date] = None) -> OrderExport:
        """
        Build an .xlsx workbook of the orders between ``start`` and ``end`` inclusive.

        Raises:
            NotFoundError: no orders in the range
            ValueError: end is before start
        """
        end = end or start
        if end < start:
            raise ValueError(f"End date {end} is before start date {start}")

        orders = self.store.select(
            Order,
            Order.date >= start,
            Order.date <= end,
            order_by=Order.created_at,
        )
        label = start.isoformat() if start == end else f"{start.isoformat()} to {end.isoformat()}"
        if not orders:
            raise NotFoundError("Orders", label)

        lines = flatten_orders(orders)
        summary = summarize_orders(orders, label)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            lines.to_excel(writer, sheet_name="Orders", index=False)
            summary.to_excel(writer, sheet_name="Summary", index=False)
            _autosize(writer.sheets["Orders"], lines)
            _autosize(writer.sheets["Summary"], summary)

        logger.info(f"Exported {len(orders)} orders ({len(lines)} lines) for {label}")
        return OrderExport(
            filename=export_filename(start, end),
            content=buffer.getvalue(),
            order_count=len(orders),
        )
