"""
Asset inventory endpoints for HR managers, plus the dashboard reports.
"""

import logging
import re
from typing import Optional, Dict, Literal

from fastapi import APIRouter, Depends
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from auth import get_current_user, require_hr_manager
from database import ASSETS, create_document, get_db, get_documents, now_millis, serialize, to_object_id
from errors import NotFound, ValidationError
from schemas import Asset, AssetCreateRequest, AssetUpdateRequest, MarkRequestedRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assets"])

ASSET_TYPES = ("returnable", "non-returnable")
TOP_REQUESTED_MIN = 2
TOP_REQUESTED_LIMIT = 4
LOW_STOCK_BELOW = 10
LOW_STOCK_LIMIT = 5


def availability_for(quantity: int) -> str:
    return "available" if quantity > 0 else "out-of-stock"


def build_asset_query(
    hr_email: str,
    search: Optional[str] = None,
    filter_status: Optional[str] = None,
    filter_type: Optional[str] = None,
) -> Dict:
    query: Dict = {"HrEmail": hr_email}
    if search:
        query["name"] = {"$regex": re.escape(search), "$options": "i"}
    # Stock status is judged by quantity; the stored availability flag can lag behind it
    if filter_status == "available":
        query["quantity"] = {"$gt": 0}
    elif filter_status == "out-of-stock":
        query["quantity"] = 0
    if filter_type:
        query["type"] = filter_type
    return query


@router.post("/assets")
def create_asset(
    payload: AssetCreateRequest,
    claims: Dict = Depends(require_hr_manager),
    db: Database = Depends(get_db),
):
    asset = Asset(
        HrEmail=claims["email"],
        availability=availability_for(payload.quantity),
        requests=0,
        addedDate=now_millis(),
        **payload.model_dump(),
    )
    inserted_id = create_document(ASSETS, asset.model_dump(), database=db)
    logger.info("%s created asset %s (%s x%d)", claims["email"], inserted_id, payload.name, payload.quantity)
    return {"acknowledged": True, "insertedId": inserted_id}


@router.get("/assets/detail/{asset_id}")
def get_asset(asset_id: str, claims: Dict = Depends(get_current_user), db: Database = Depends(get_db)):
    asset = db[ASSETS].find_one({"_id": to_object_id(asset_id)})
    if not asset:
        raise NotFound("Asset not found")
    return serialize(asset)


@router.get("/assets/top-requested/{hr_email}")
def top_requested_assets(hr_email: str, claims: Dict = Depends(require_hr_manager), db: Database = Depends(get_db)):
    return get_documents(
        ASSETS,
        {"HrEmail": hr_email, "requests": {"$gt": TOP_REQUESTED_MIN}},
        limit=TOP_REQUESTED_LIMIT,
        sort=[("requests", DESCENDING)],
        database=db,
    )


@router.get("/assets/low-stock/{hr_email}")
def low_stock_assets(hr_email: str, claims: Dict = Depends(require_hr_manager), db: Database = Depends(get_db)):
    return get_documents(
        ASSETS,
        {"HrEmail": hr_email, "quantity": {"$lt": LOW_STOCK_BELOW}},
        limit=LOW_STOCK_LIMIT,
        sort=[("quantity", ASCENDING)],
        database=db,
    )


@router.get("/assets/{hr_email}")
def list_assets(
    hr_email: str,
    search: Optional[str] = None,
    filterStatus: Optional[Literal["available", "out-of-stock"]] = None,
    filterType: Optional[Literal["returnable", "non-returnable"]] = None,
    sort: Optional[Literal["asc", "desc"]] = None,
    claims: Dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    query = build_asset_query(hr_email, search, filterStatus, filterType)
    order = None
    if sort:
        order = [("quantity", ASCENDING if sort == "asc" else DESCENDING)]
    return get_documents(ASSETS, query, sort=order, database=db)


@router.put("/assets/{asset_id}")
def update_asset(
    asset_id: str,
    payload: AssetUpdateRequest,
    claims: Dict = Depends(require_hr_manager),
    db: Database = Depends(get_db),
):
    object_id = to_object_id(asset_id)
    missing = [f for f in ("name", "type", "image") if not (getattr(payload, f) or "").strip()]
    if missing:
        raise ValidationError("Missing required fields", missing)
    if payload.type not in ASSET_TYPES:
        raise ValidationError("Invalid asset type", payload.type)
    if payload.quantity is None or payload.quantity <= 0:
        raise ValidationError("Quantity must be greater than 0", payload.quantity)

    # Availability is reset on every edit, whatever the quantity
    fields = {
        "name": payload.name.strip(),
        "type": payload.type,
        "image": payload.image.strip(),
        "quantity": payload.quantity,
        "availability": "available",
    }
    result = db[ASSETS].update_one({"_id": object_id}, {"$set": fields})
    if result.matched_count == 0:
        raise NotFound("Asset not found")
    logger.info("%s updated asset %s", claims["email"], asset_id)
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


@router.patch("/assets/mark-requested/{asset_id}")
def mark_asset_requested(
    asset_id: str,
    payload: MarkRequestedRequest,
    claims: Dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    result = db[ASSETS].update_one(
        {"_id": to_object_id(asset_id)},
        {
            "$inc": {"requests": 1},
            "$set": {"quantity": payload.quantity, "availability": payload.availability},
        },
    )
    if result.matched_count == 0:
        raise NotFound("Asset not found")
    logger.info("Asset %s requested by %s, %d left", asset_id, claims["email"], payload.quantity)
    return {"matchedCount": result.matched_count, "modifiedCount": result.modified_count}


@router.delete("/assets/{asset_id}")
def delete_asset(asset_id: str, claims: Dict = Depends(require_hr_manager), db: Database = Depends(get_db)):
    result = db[ASSETS].delete_one({"_id": to_object_id(asset_id)})
    if result.deleted_count == 0:
        raise NotFound("Asset not found")
    logger.info("%s deleted asset %s", claims["email"], asset_id)
    return {"acknowledged": True, "deletedCount": result.deleted_count}
