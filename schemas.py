"""
Database Schemas for the Asset Management backend

Each document model below represents a MongoDB collection:

- User -> "users"
- Employee -> "employees"
- Asset -> "assets"
- AssetRequest -> "requests"

Documents are loosely typed: extra fields sent by the client are kept.
The remaining models are request bodies for the API.
"""

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, EmailStr, field_validator
from typing import Optional, Literal

HR_MANAGER = "hr-manager"
EMPLOYEE = "employee"

AssetType = Literal["returnable", "non-returnable"]
Availability = Literal["available", "out-of-stock"]
RequestStatus = Literal["pending", "approved", "rejected", "cancelled", "returned"]


# ----------------------------
# Collection documents
# ----------------------------
class User(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr = Field(..., description="Unique email")
    name: Optional[str] = None
    role: Literal["hr-manager", "employee"] = Field(
        EMPLOYEE, description="Access role determining permissions"
    )
    company: Optional[str] = None
    companyImage: Optional[str] = None
    companyEmail: Optional[str] = None
    selectedPackage: int = Field(0, ge=0, description="Cumulative purchased seat count")
    hasPaid: bool = False
    photo: Optional[str] = None
    dateOfBirth: Optional[str] = None


class Employee(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    email: EmailStr
    companyEmail: EmailStr = Field(..., description="Email of the owning company's HR manager")
    photo: Optional[str] = None
    dateOfBirth: Optional[str] = None


class Asset(BaseModel):
    HrEmail: str
    name: str
    type: AssetType
    image: Optional[str] = ""
    quantity: int = Field(..., ge=0)
    availability: Availability = "available"
    requests: int = Field(0, ge=0, description="Times this asset has been requested")
    addedDate: Optional[int] = Field(None, description="Epoch milliseconds")


class AssetSnapshot(BaseModel):
    """Copy of an asset embedded in a request at request time."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    type: AssetType
    quantity: int = Field(..., ge=0)
    HrEmail: str
    image: Optional[str] = None

    @field_validator("id")
    @classmethod
    def _id_is_object_id(cls, value: str) -> str:
        if not ObjectId.is_valid(value):
            raise ValueError("asset _id is not a valid identifier")
        return value


class AssetRequest(BaseModel):
    asset: AssetSnapshot
    email: str
    name: Optional[str] = None
    notes: Optional[str] = None
    requestDate: int = Field(..., description="Epoch milliseconds")
    status: RequestStatus = "pending"
    approvalDate: Optional[int] = None


# ----------------------------
# Request bodies
# ----------------------------
class RegisterUserRequest(BaseModel):
    hrInfo: User


class CompanyProfileUpdate(BaseModel):
    company: Optional[str] = None
    companyImage: Optional[str] = None
    companyEmail: Optional[str] = None


class PaymentSuccessRequest(BaseModel):
    selectedPackage: int = Field(..., gt=0)


class AssetCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    type: AssetType
    image: Optional[str] = ""
    quantity: int = Field(..., ge=0)


class AssetUpdateRequest(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    image: Optional[str] = None
    quantity: Optional[int] = None


class MarkRequestedRequest(BaseModel):
    quantity: int = Field(..., ge=0)
    availability: Availability


class AssetRequestCreate(BaseModel):
    asset: AssetSnapshot
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    notes: Optional[str] = None


class PaymentIntentRequest(BaseModel):
    price: float = Field(..., gt=0, description="Package price in dollars")
