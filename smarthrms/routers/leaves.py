from fastapi import APIRouter, Query
from typing import List, Optional

from smarthrms.services.db import leaves_coll
from smarthrms.services.leave_manager import LeaveManager
from smarthrms.models.schemas import LeaveRequestModel
from smarthrms.models.payloads import LeaveRequestCreate, ReviewPayload
from smarthrms.helpers.records import leave_record

router = APIRouter()


def _newest_first(docs):
    return sorted((leave_record(d) for d in docs), key=lambda l: str(l["applied_at"]), reverse=True)


@router.post("", response_model=LeaveRequestModel)
async def request_leave(payload: LeaveRequestCreate):
    """Submit a leave request (starts as pending)"""
    leave = await LeaveManager.request_leave(payload)
    return LeaveRequestModel(**leave_record(leave))


@router.get("/all", response_model=List[LeaveRequestModel])
async def list_all_leaves():
    """Get all leave requests, newest first"""
    cursor = leaves_coll.find({})
    leaves = await cursor.to_list(length=None)
    return [LeaveRequestModel(**l) for l in _newest_first(leaves)]


@router.get("/status", response_model=List[LeaveRequestModel])
async def list_leaves_by_status(status: str = Query(..., description="Leave status ('pending', 'approved', 'rejected')")):
    """Get all leave requests with a specific status"""
    cursor = leaves_coll.find({"status": status})
    leaves = await cursor.to_list(length=None)
    return [LeaveRequestModel(**l) for l in _newest_first(leaves)]


@router.get("/employee/{employee_id}", response_model=List[LeaveRequestModel])
async def list_leaves_for_employee(employee_id: str):
    """Get all leave requests of an employee"""
    cursor = leaves_coll.find({"employee_id": employee_id})
    leaves = await cursor.to_list(length=None)
    return [LeaveRequestModel(**l) for l in _newest_first(leaves)]


@router.post("/{leave_id}/approve", response_model=LeaveRequestModel)
async def approve_leave(leave_id: str, payload: Optional[ReviewPayload] = None):
    """Approve a pending leave request"""
    reviewer = payload.reviewed_by if payload else None
    leave = await LeaveManager.review_leave(leave_id, LeaveManager.STATUS_APPROVED, reviewer)
    return LeaveRequestModel(**leave_record(leave))


@router.post("/{leave_id}/reject", response_model=LeaveRequestModel)
async def reject_leave(leave_id: str, payload: Optional[ReviewPayload] = None):
    """Reject a pending leave request"""
    reviewer = payload.reviewed_by if payload else None
    leave = await LeaveManager.review_leave(leave_id, LeaveManager.STATUS_REJECTED, reviewer)
    return LeaveRequestModel(**leave_record(leave))
