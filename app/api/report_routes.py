"""
Report Routes - abuse reports against listed profiles
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.exceptions import APIException, UpstreamError
from app.database.connection import get_db
from app.models.reports import ReportCreateRequest, ReportResponse
from app.services.report_service import report_service

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Reports"])


@router.post("/report-profile", status_code=status.HTTP_201_CREATED)
async def report_profile(request: ReportCreateRequest, db: AsyncSession = Depends(get_db)):
    """
    Store an abuse report

    Reports are append-only; the same reporter may report the same profile
    any number of times.
    """
    try:
        report = await report_service.submit_report(db, request)
        return {
            "success": True,
            "message": "Report submitted successfully",
            "report": ReportResponse(
                id=str(report.id),
                reporting_user_id=report.reporting_user_id,
                reported_profile_id=str(report.reported_profile_ref),
                reason=report.reason,
                category=report.category,
                message=report.message,
                created_at=report.created_at
            ).model_dump(by_alias=True, mode="json")
        }

    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error submitting report: {e}")
        raise UpstreamError("Failed to submit report")
