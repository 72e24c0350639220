"""
Admin Dashboard Router
Overview counters for the admin panel: revenue, orders, products and monthly sales.
"""
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends

from storefront.config import get_db
from storefront.core.auth import require_admin
from storefront.repositories import orders as orders_repo
from storefront.repositories import products as products_repo

router = APIRouter(prefix="/dashboard", tags=["Admin: Dashboard"], dependencies=[Depends(require_admin)])


def _month_key(ts) -> str:
    if isinstance(ts, datetime):
        return ts.strftime("%Y-%m")
    return "unknown"


@router.get("/stats")
def get_dashboard_stats(db=Depends(get_db)) -> Dict[str, Any]:
    """
    Cancelled orders are counted but do not add to revenue.
    `pending_orders` counts only orders still in `pending` status.
    `sales_by_month` is ordered oldest → newest.
    """
    stats: Dict[str, Any] = {
        "total_orders": 0,
        "total_revenue": 0.0,
        "pending_orders": 0,
        "total_products": products_repo.count_products(db),
        "sales_by_month": [],
    }

    monthly: Dict[str, float] = {}
    for order in orders_repo.list_all_orders(db):
        stats["total_orders"] += 1
        status = (order.get("status") or "").strip()
        if status == "pending":
            stats["pending_orders"] += 1
        if status == "cancelled":
            continue
        amount = float((order.get("totals") or {}).get("total", 0) or 0)
        stats["total_revenue"] += amount
        key = _month_key(order.get("created_at"))
        monthly[key] = monthly.get(key, 0.0) + amount

    stats["sales_by_month"] = [{"month": m, "sales": round(v, 2)} for m, v in sorted(monthly.items())]
    stats["total_revenue"] = round(stats["total_revenue"], 2)
    return stats
