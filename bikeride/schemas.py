import enum
from datetime import datetime, timezone
from typing import Optional, List

from pydantic import BaseModel, EmailStr, Field, validator


BIKE_TYPES = ["Mountain", "City", "Road", "Electric", "Hybrid", "Tandem", "BMX", "Cruiser"]


class BookingType(str, enum.Enum):
    instant = "instant"
    pre_reservation = "pre_reservation"


class BookingStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    completed = "completed"
    cancelled = "cancelled"


class DurationType(str, enum.Enum):
    hours = "hours"
    days = "days"


class DeliveryStatus(str, enum.Enum):
    pending = "pending"
    delivered = "delivered"


class ReturnStatus(str, enum.Enum):
    pending = "pending"
    returned = "returned"


def _to_naive_utc(v: Optional[datetime]) -> Optional[datetime]:
    # Everything is stored as naive UTC
    if v is not None and v.tzinfo is not None:
        v = v.astimezone(timezone.utc).replace(tzinfo=None)
    return v


# ----- Users -----
class UserBase(BaseModel):
    username: str
    email: EmailStr
    display_name: Optional[str] = None


class UserCreate(UserBase):
    password: str


class UserUpdate(BaseModel):
    display_name: Optional[str] = None
    email: Optional[EmailStr] = None


class UserOut(UserBase):
    id: int

    class Config:
        from_attributes = True


class CurrentUserOut(UserOut):
    is_admin: bool = False


# ----- Bikes -----
class BikeBase(BaseModel):
    name: str
    type: str
    description: str = ""
    hourly_rate: float
    daily_rate: float
    image_url: Optional[str] = None
    is_available: bool = True
    bike_number: Optional[str] = None


class BikeCreate(BikeBase):
    @validator("type")
    def known_type(cls, v):
        if v not in BIKE_TYPES:
            raise ValueError(f"type must be one of: {', '.join(BIKE_TYPES)}")
        return v

    @validator("hourly_rate", "daily_rate")
    def positive_rate(cls, v):
        if v <= 0:
            raise ValueError("rate must be positive")
        return v


class BikeUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    hourly_rate: Optional[float] = None
    daily_rate: Optional[float] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    bike_number: Optional[str] = None

    @validator("type")
    def known_type(cls, v):
        if v is not None and v not in BIKE_TYPES:
            raise ValueError(f"type must be one of: {', '.join(BIKE_TYPES)}")
        return v

    @validator("hourly_rate", "daily_rate")
    def positive_rate(cls, v):
        if v is not None and v <= 0:
            raise ValueError("rate must be positive")
        return v


class BikeOut(BikeBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BikeSummary(BaseModel):
    id: int
    name: str
    type: str
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class BikeCatalog(BaseModel):
    items: List[BikeOut]
    count: int
    types: List[str]


# ----- Bookings -----
class BookingCreate(BaseModel):
    bike_id: int
    booking_type: BookingType = BookingType.instant
    start_time: Optional[datetime] = None
    duration: int = Field(1, ge=1, le=30)
    duration_type: DurationType = DurationType.hours
    customer_name: Optional[str] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: str = Field(..., min_length=1)
    notes: Optional[str] = None

    @validator("start_time")
    def ensure_naive_datetime(cls, v):
        return _to_naive_utc(v)


class BookingOut(BaseModel):
    id: int
    user_id: int
    bike_id: int
    booking_type: str
    start_time: datetime
    end_time: datetime
    total_amount: float
    status: str
    customer_name: str
    customer_email: str
    customer_phone: str
    notes: Optional[str] = None
    delivery_status: Optional[str] = None
    delivered_at: Optional[datetime] = None
    return_status: Optional[str] = None
    returned_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BookingDetail(BookingOut):
    bike: Optional[BikeSummary] = None
    bike_name: str
    status_label: str


class BookingCreated(BaseModel):
    booking: BookingOut
    message: str


class BookingSummary(BaseModel):
    total: int
    active: int
    pending: int
    completed: int
    total_spent: float


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class DeliveryUpdate(BaseModel):
    delivery_status: DeliveryStatus


class ReturnUpdate(BaseModel):
    return_status: ReturnStatus


class BookingActionResult(BaseModel):
    booking: BookingOut
    notified: bool
    message: str


# ----- Admin -----
class AdminSetupRequest(BaseModel):
    code: str


class AdminSetupStatus(BaseModel):
    has_admins: bool
    is_admin: bool


class DashboardStats(BaseModel):
    total_bikes: int
    available_bikes: int
    availability_rate: int
    total_bookings: int
    pending_bookings: int
    total_revenue: float
    monthly_revenue: float
    unique_customers: int


# ----- Auth -----
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    username: Optional[str] = None
