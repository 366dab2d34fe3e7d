from fastapi import APIRouter, HTTPException, Request
from datetime import date, datetime
from typing import List
import uuid

from pymongo import ReturnDocument

from smarthrms.services.db import employees_coll
from smarthrms.models.schemas import EmployeeModel
from smarthrms.models.payloads import EmployeeCreate, EmployeeUpdate
from smarthrms.helpers.records import employee_record, to_document

# Import logging and exceptions
from smarthrms.utils.logging_config import get_logger, PerformanceMonitor
from smarthrms.utils.exceptions import BusinessLogicError, ExceptionContext

router = APIRouter()
logger = get_logger(__name__)


@router.post("", response_model=EmployeeModel)
async def add_employee(payload: EmployeeCreate, request: Request):
    """Add an employee to the directory"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    with ExceptionContext("add_employee", logger, request_id=request_id):
        existing = await employees_coll.find_one({"email": payload.email})
        if existing:
            raise BusinessLogicError(
                f"An employee with email {payload.email} already exists",
                rule="unique_employee_email",
                details={"email": payload.email},
            )

        employee_data = payload.model_dump()
        employee_data.update({
            "employee_id": str(uuid.uuid4()),
            "join_date": payload.join_date or date.today(),
            "created_at": datetime.utcnow(),
            "updated_at": None,
        })
        await employees_coll.insert_one(to_document(employee_data))

    logger.info(
        f"Added employee {employee_data['employee_id']} ({payload.email})",
        extra={"request_id": request_id}
    )
    return EmployeeModel(**employee_data)


@router.get("/all", response_model=List[EmployeeModel])
async def list_all_employees(request: Request):
    """Get all employees in the directory"""
    request_id = getattr(request.state, 'request_id', 'unknown')

    with PerformanceMonitor("list_all_employees", logger):
        with ExceptionContext("fetch_employees", logger, request_id=request_id):
            cursor = employees_coll.find({})
            employees = await cursor.to_list(length=None)

    logger.info(
        f"Successfully fetched {len(employees)} employees",
        extra={"request_id": request_id, "employee_count": len(employees)}
    )
    return [EmployeeModel(**employee_record(e)) for e in employees]


@router.get("/department/{department}", response_model=List[EmployeeModel])
async def list_employees_by_department(department: str):
    """Get all employees of a department"""
    cursor = employees_coll.find({"department": department})
    employees = await cursor.to_list(length=None)
    return [EmployeeModel(**employee_record(e)) for e in employees]


@router.get("/{employee_id}", response_model=EmployeeModel)
async def get_employee(employee_id: str):
    """Fetch an employee by ID"""
    employee = await employees_coll.find_one({"employee_id": employee_id})
    if not employee:
        logger.warning(f"Employee not found: {employee_id}")
        raise HTTPException(status_code=404, detail="Employee not found")
    return EmployeeModel(**employee_record(employee))


@router.patch("/{employee_id}", response_model=EmployeeModel)
async def update_employee(employee_id: str, updates: EmployeeUpdate):
    """Update an employee's profile, availability or skills"""
    changes = to_document(updates.model_dump(exclude_unset=True))
    changes["updated_at"] = datetime.utcnow()

    employee = await employees_coll.find_one_and_update(
        {"employee_id": employee_id},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not employee:
        raise HTTPException(status_code=404, detail="Employee not found")

    logger.info(f"Updated employee {employee_id}: {sorted(changes)}")
    return EmployeeModel(**employee_record(employee))


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str):
    """Remove an employee from the directory"""
    result = await employees_coll.delete_one({"employee_id": employee_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Employee not found")

    logger.info(f"Deleted employee {employee_id}")
    return {"employee_id": employee_id, "deleted": True}
