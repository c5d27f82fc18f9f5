"""
Report Service - append-only abuse reports
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MissingFieldsError, NotFoundError, ValidationError
from app.database.models import AbuseReport
from app.models.reports import ReportCategory, ReportCreateRequest, ReportReason
from app.services.profile_service import profile_service
from app.utils.clock import utcnow

logger = logging.getLogger(__name__)

VALID_REASONS = [reason.value for reason in ReportReason]
VALID_CATEGORIES = [category.value for category in ReportCategory]


class ReportService:

    async def submit_report(self, db: AsyncSession, data: ReportCreateRequest) -> AbuseReport:
        fields = {
            "reportingUserId": data.reporting_user_id,
            "reportedProfileId": data.reported_profile_id,
            "reason": data.reason,
            "category": data.category,
            "message": data.message,
        }
        missing = [name for name, value in fields.items() if not value or not value.strip()]
        if missing:
            logger.warning(f"Report validation failed, missing: {missing}")
            raise MissingFieldsError(missing, "All fields are required")

        if data.reason not in VALID_REASONS:
            raise ValidationError(f"Invalid reason. Must be one of: {', '.join(VALID_REASONS)}", code="invalid_reason")
        if data.category not in VALID_CATEGORIES:
            raise ValidationError(
                f"Invalid category. Must be one of: {', '.join(VALID_CATEGORIES)}", code="invalid_category"
            )

        reported = await profile_service.get_by_reference(db, data.reported_profile_id)
        if reported is None:
            raise NotFoundError("Reported profile not found", code="target_not_found")

        report = AbuseReport(
            reporting_user_id=data.reporting_user_id,
            reported_profile_ref=reported.id,
            reason=data.reason,
            category=data.category,
            message=data.message,
            created_at=utcnow()
        )
        db.add(report)
        await db.commit()

        logger.info(f"Report {report.id} saved: {data.reporting_user_id} -> {reported.id} ({data.reason}/{data.category})")
        return report


report_service = ReportService()
