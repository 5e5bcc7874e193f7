"""
User and company onboarding endpoints.

HR managers register themselves together with their company, edit the
company profile, and record package purchases made through
``/create-payment-intent``.
"""

import logging
from typing import Dict

from fastapi import APIRouter, Depends
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from auth import get_current_user
from database import USERS, create_document, get_db, get_documents, serialize, to_object_id
from errors import NotFound, ValidationError
from schemas import HR_MANAGER, CompanyProfileUpdate, PaymentSuccessRequest, RegisterUserRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users"])

USER_EXISTS = {"message": "User Already Exists In DB", "insertedId": None}


@router.post("/users")
def register_user(payload: RegisterUserRequest, db: Database = Depends(get_db)):
    info = payload.hrInfo.model_dump(exclude_none=True)
    if db[USERS].find_one({"email": info["email"]}):
        return USER_EXISTS
    try:
        inserted_id = create_document(USERS, info, database=db)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration of the same email
        return USER_EXISTS
    logger.info("Registered user %s as %s", info["email"], info.get("role"))
    return {"acknowledged": True, "insertedId": inserted_id}


@router.get("/users")
def list_users(claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return get_documents(USERS, database=db)


@router.get("/users/role/{email}")
def get_user_role(email: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    user = db[USERS].find_one({"email": email}, {"role": 1})
    role = user.get("role") if user else None
    return {"role": role, "isHrManager": role == HR_MANAGER}


@router.get("/users/{email}")
def get_user(email: str, db: Database = Depends(get_db)):
    user = db[USERS].find_one({"email": email})
    return serialize(user) if user else None


@router.patch("/update-employee/{user_id}")
def update_company_profile(user_id: str, payload: CompanyProfileUpdate, db: Database = Depends(get_db)):
    fields = payload.model_dump(exclude_none=True)
    if not fields:
        raise ValidationError("Nothing to update", "company, companyImage or companyEmail is required")
    result = db[USERS].update_one({"_id": to_object_id(user_id)}, {"$set": fields})
    if result.matched_count == 0:
        raise NotFound("User not found")
    logger.info("Updated company profile of user %s: %s", user_id, ", ".join(fields))
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


@router.patch("/user-payment-success/{user_id}")
def record_payment_success(user_id: str, payload: PaymentSuccessRequest, db: Database = Depends(get_db)):
    # Replaying this call adds the package again; there is no dedup key
    result = db[USERS].update_one(
        {"_id": to_object_id(user_id)},
        {"$inc": {"selectedPackage": payload.selectedPackage}, "$set": {"hasPaid": True}},
    )
    if result.matched_count == 0:
        raise NotFound("User not found")
    logger.info("Recorded payment of %d package units for user %s", payload.selectedPackage, user_id)
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}
