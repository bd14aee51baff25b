"""
Dashboard API - monthly summary for the home screen.

Returns this month's revenue, expenses, profit and shipment count plus the
five most recent shipments. Computed from the stored records on every call.
"""
from fastapi import APIRouter, Depends

from catchbook.api.deps import get_current_user_id, get_store
from catchbook.core.exceptions import BusinessError, StoreError
from catchbook.services.dashboard_service import build_dashboard
from catchbook.services.store import RecordStore

router = APIRouter()


@router.get("/dashboard")
def get_dashboard(
    store: RecordStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """
    Returns: {monthlyStats: {revenue, expenses, profit, shipments,
              revenueChange, expenseChange}, recentShipments: [...]}
    """
    try:
        return build_dashboard(store, user_id)
    except StoreError as e:
        raise BusinessError.server_error("ダッシュボードデータの取得に失敗しました", e)
