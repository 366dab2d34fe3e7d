"""
Leave Management Service for leave requests and their review
"""
from datetime import date, datetime
from typing import Any, Dict, Optional
import uuid

from pymongo import ReturnDocument

from smarthrms.services.db import leaves_coll, employees_coll
from smarthrms.models.payloads import LeaveRequestCreate
from smarthrms.helpers.records import to_document
from smarthrms.utils.exceptions import NotFoundError, BusinessLogicError, ValidationError
from smarthrms.utils.logging_config import get_logger

logger = get_logger(__name__)


class LeaveManager:
    """Manages leave requests: pending -> approved | rejected"""

    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"

    @staticmethod
    def leave_days(start_date: date, end_date: date) -> int:
        """Inclusive number of calendar days covered by a leave request"""
        if end_date < start_date:
            raise ValidationError(
                "Leave end date is before its start date",
                field="end_date",
                value=end_date.isoformat(),
            )
        return (end_date - start_date).days + 1

    @staticmethod
    async def request_leave(payload: LeaveRequestCreate) -> Dict[str, Any]:
        days = LeaveManager.leave_days(payload.start_date, payload.end_date)

        employee = await employees_coll.find_one({"employee_id": payload.employee_id})
        if not employee:
            raise NotFoundError(
                f"Employee {payload.employee_id} not found",
                resource="employee",
                resource_id=payload.employee_id,
            )

        leave_data = to_document(payload.model_dump())
        leave_data.update({
            "leave_id": str(uuid.uuid4()),
            "days": days,
            "status": LeaveManager.STATUS_PENDING,
            "applied_at": datetime.utcnow(),
            "reviewed_by": None,
            "reviewed_at": None,
        })
        await leaves_coll.insert_one(leave_data)

        logger.info(f"Leave {leave_data['leave_id']} requested by {payload.employee_id} for {days} day(s)")
        return leave_data

    @staticmethod
    async def review_leave(leave_id: str, status: str, reviewed_by: Optional[str] = None) -> Dict[str, Any]:
        """Approve or reject a pending leave request"""
        if status not in (LeaveManager.STATUS_APPROVED, LeaveManager.STATUS_REJECTED):
            raise ValidationError(f"Invalid review status: {status}", field="status", value=status)

        leave = await leaves_coll.find_one({"leave_id": leave_id})
        if not leave:
            raise NotFoundError(f"Leave request {leave_id} not found", resource="leave_request", resource_id=leave_id)

        current = leave.get("status", LeaveManager.STATUS_PENDING)
        if current != LeaveManager.STATUS_PENDING:
            raise BusinessLogicError(
                f"Leave request {leave_id} has already been {current}",
                rule="review_pending_only",
                details={"leave_id": leave_id, "status": current},
            )

        updated = await leaves_coll.find_one_and_update(
            {"leave_id": leave_id, "status": LeaveManager.STATUS_PENDING},
            {"$set": {
                "status": status,
                "reviewed_by": reviewed_by,
                "reviewed_at": datetime.utcnow(),
            }},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            # reviewed concurrently between the read and the update
            raise BusinessLogicError(
                f"Leave request {leave_id} is no longer pending",
                rule="review_pending_only",
                details={"leave_id": leave_id},
            )

        logger.info(f"Leave {leave_id} {status} by {reviewed_by or 'unknown reviewer'}")
        return updated
