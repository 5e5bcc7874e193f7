"""
Employee asset requests and their approval workflow.

A request moves through::

    pending -> approved -> returned
    pending -> rejected
    pending -> cancelled

Creating a request does not touch inventory; the client decrements the
asset separately through ``/assets/mark-requested``. Rejecting,
cancelling and returning hand one unit back: first on the asset snapshot
embedded in the request, then on the live asset. The two writes are
independent, so if the second fails the request stays resolved while the
live quantity is not restored. Nothing rolls the first write back.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, Dict, Literal

from fastapi import APIRouter, Depends
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from auth import get_current_user, require_hr_manager
from database import ASSETS, REQUESTS, create_document, get_db, get_documents, now_millis, serialize, to_object_id
from errors import ValidationError
from schemas import AssetRequest, AssetRequestCreate, RequestStatus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["requests"])

PENDING_LIMIT = 5
MONTHLY_LIMIT = 4

NEWEST_FIRST = [("requestDate", DESCENDING)]


def _transition_failed(verb: str, from_status: str) -> ValidationError:
    return ValidationError(
        f"Failed to {verb} request. It may not exist or is no longer {from_status}."
    )


def _resolve(db: Database, request_id: str, from_status: str, to_status: str, verb: str) -> Dict:
    """Move a request to ``to_status`` and put its unit back into inventory."""
    match = {"_id": to_object_id(request_id), "status": from_status}
    current = db[REQUESTS].find_one(match, {"asset._id": 1})
    if not current:
        raise _transition_failed(verb, from_status)
    asset_id = current["asset"]["_id"]
    asset_object_id = to_object_id(asset_id)

    updated = db[REQUESTS].find_one_and_update(
        match,
        {"$set": {"status": to_status}, "$inc": {"asset.quantity": 1}},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise _transition_failed(verb, from_status)
    logger.info("Request %s %s -> %s", request_id, from_status, to_status)

    restored = db[ASSETS].update_one(
        {"_id": asset_object_id},
        {"$inc": {"quantity": 1}, "$set": {"availability": "available"}},
    )
    if restored.matched_count == 0:
        logger.warning("Request %s resolved but asset %s no longer exists", request_id, asset_id)

    request = serialize(updated)
    return {
        "message": f"Request {to_status}",
        "status": request["status"],
        "approvalDate": request.get("approvalDate"),
        "request": request,
    }


def start_of_month_millis(now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return int(start.timestamp() * 1000)


@router.post("/assets/request")
def create_request(
    payload: AssetRequestCreate,
    claims: Dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    request = AssetRequest(
        asset=payload.asset,
        email=payload.email or claims["email"],
        name=payload.name or claims.get("name"),
        notes=payload.notes or "",
        requestDate=now_millis(),
    )
    doc = request.model_dump()
    doc["asset"] = payload.asset.model_dump(by_alias=True, exclude_none=True)
    inserted_id = create_document(REQUESTS, doc, database=db)
    logger.info("%s requested asset %s (request %s)", request.email, payload.asset.id, inserted_id)
    return {"acknowledged": True, "insertedId": inserted_id}


@router.patch("/requests/approve/{request_id}")
def approve_request(request_id: str, claims: Dict = Depends(require_hr_manager), db: Database = Depends(get_db)):
    updated = db[REQUESTS].find_one_and_update(
        {"_id": to_object_id(request_id), "status": "pending"},
        {"$set": {"status": "approved", "approvalDate": now_millis()}},
        return_document=ReturnDocument.AFTER,
    )
    if not updated:
        raise _transition_failed("approve", "pending")
    logger.info("%s approved request %s", claims["email"], request_id)
    request = serialize(updated)
    return {
        "message": "Request approved",
        "status": request["status"],
        "approvalDate": request["approvalDate"],
        "request": request,
    }


@router.patch("/requests/reject/{request_id}")
def reject_request(request_id: str, claims: Dict = Depends(require_hr_manager), db: Database = Depends(get_db)):
    return _resolve(db, request_id, "pending", "rejected", "reject")


@router.patch("/requests/cancel/{request_id}")
def cancel_request(request_id: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return _resolve(db, request_id, "pending", "cancelled", "cancel")


@router.patch("/requests/return/{request_id}")
def return_request(request_id: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return _resolve(db, request_id, "approved", "returned", "return")


@router.get("/requests/hr/{hr_email}")
def list_manager_requests(
    hr_email: str,
    search: Optional[str] = None,
    status: Optional[RequestStatus] = None,
    assetType: Optional[Literal["returnable", "non-returnable"]] = None,
    claims: Dict = Depends(require_hr_manager),
    db: Database = Depends(get_db),
):
    query: Dict = {"asset.HrEmail": hr_email}
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{"email": pattern}, {"asset.name": pattern}]
    if status:
        query["status"] = status
    if assetType:
        query["asset.type"] = assetType
    return get_documents(REQUESTS, query, sort=NEWEST_FIRST, database=db)


@router.get("/requests/employee/{email}")
def list_employee_requests(
    email: str,
    search: Optional[str] = None,
    assetType: Optional[Literal["returnable", "non-returnable"]] = None,
    claims: Dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    query: Dict = {"email": email}
    if search:
        query["asset.name"] = {"$regex": re.escape(search), "$options": "i"}
    if assetType:
        query["asset.type"] = assetType
    return get_documents(REQUESTS, query, sort=NEWEST_FIRST, database=db)


@router.get("/requests/pending/{email}")
def list_pending_requests(email: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return get_documents(
        REQUESTS,
        {"email": email, "status": "pending"},
        limit=PENDING_LIMIT,
        sort=NEWEST_FIRST,
        database=db,
    )


@router.get("/requests/monthly/{email}")
def list_monthly_requests(email: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return get_documents(
        REQUESTS,
        {"email": email, "requestDate": {"$gte": start_of_month_millis()}},
        limit=MONTHLY_LIMIT,
        sort=NEWEST_FIRST,
        database=db,
    )
