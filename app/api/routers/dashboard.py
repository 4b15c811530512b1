from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import admin_or_sale, get_db
from app.domain.access import AuthContext
from app.schemas.dashboard import DashboardStats
from app.schemas.response import ApiResponse
from app.services.dashboard import get_dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse[DashboardStats])
def get_stats(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(admin_or_sale),
):
    """Counts and the most recently added products."""
    return ApiResponse[DashboardStats](data=get_dashboard_stats(db))
