"""
Company roster endpoints: bulk add, list by company, lookup, remove.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List

from fastapi import APIRouter, Depends
from pymongo.database import Database

from auth import get_current_user, require_hr_manager
from database import EMPLOYEES, get_db, get_documents, serialize, to_object_id
from errors import NotFound, ValidationError
from schemas import Employee

logger = logging.getLogger(__name__)

router = APIRouter(tags=["employees"])


@router.post("/add-employee")
def add_employees(
    employees: List[Employee],
    claims: Dict = Depends(require_hr_manager),
    db: Database = Depends(get_db),
):
    if not employees:
        raise ValidationError("No employees to add")
    now = datetime.now(timezone.utc)
    docs = []
    for employee in employees:
        doc = employee.model_dump(exclude_none=True)
        doc.setdefault("joinedAt", now)
        doc["created_at"] = now
        docs.append(doc)
    result = db[EMPLOYEES].insert_many(docs)
    logger.info("%s added %d employees", claims["email"], len(result.inserted_ids))
    return {
        "acknowledged": True,
        "insertedCount": len(result.inserted_ids),
        "insertedIds": [str(i) for i in result.inserted_ids],
    }


@router.get("/employees/member/{email}")
def get_employee(email: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    employee = db[EMPLOYEES].find_one({"email": email})
    return serialize(employee) if employee else None


@router.get("/employees/{company_email}")
def list_company_employees(
    company_email: str,
    claims: Dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    return get_documents(EMPLOYEES, {"companyEmail": company_email}, database=db)


@router.delete("/employees/{employee_id}")
def remove_employee(
    employee_id: str,
    claims: Dict = Depends(require_hr_manager),
    db: Database = Depends(get_db),
):
    # Requests made by the employee are left in place
    result = db[EMPLOYEES].delete_one({"_id": to_object_id(employee_id)})
    if result.deleted_count == 0:
        raise NotFound("Employee not found")
    logger.info("%s removed employee %s", claims["email"], employee_id)
    return {"acknowledged": True, "deletedCount": result.deleted_count}
