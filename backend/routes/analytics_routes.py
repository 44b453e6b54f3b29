import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from auth import require_admin
from services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin/analytics", tags=["Analytics"])


def _filtered(search, course_id, status, employment_status) -> list:
    rows = AnalyticsService.progress_rows()
    return AnalyticsService.filter_rows(rows, search, course_id, status, employment_status)


@router.get("/progress")
async def progress_report(
    search: Optional[str] = None,
    course_id: Optional[str] = None,
    status: Optional[str] = None,
    employment_status: Optional[str] = None,
    admin: str = Depends(require_admin),
):
    try:
        return _filtered(search, course_id, status, employment_status)
    except Exception as e:
        logger.error(f"Progress report failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch progress data")


@router.get("/stats")
async def stats(admin: str = Depends(require_admin)):
    try:
        return AnalyticsService.stats()
    except Exception as e:
        logger.error(f"Analytics stats failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")


@router.get("/export")
async def export_csv(
    search: Optional[str] = None,
    course_id: Optional[str] = None,
    status: Optional[str] = None,
    employment_status: Optional[str] = None,
    admin: str = Depends(require_admin),
):
    try:
        content = AnalyticsService.to_csv(_filtered(search, course_id, status, employment_status))
    except Exception as e:
        logger.error(f"Progress export failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to export progress report")

    filename = f"progress_report_{date.today().isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
