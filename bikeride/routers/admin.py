from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from .. import schemas, models
from ..booking_views import with_bikes, UNKNOWN_BIKE
from ..config import ADMIN_SETUP_CODE
from ..deps import get_db, get_current_user, get_admin_user, is_admin
from ..notifications import send_booking_notifications
from ..store import Collection

router = APIRouter(prefix="/admin", tags=["admin"])

REVENUE_STATUSES = ("approved", "completed")


# ----- Admin elevation -----
@router.get("/setup", response_model=schemas.AdminSetupStatus)
def admin_setup_status(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Whether any admin exists yet, and whether the caller is one."""
    return {
        "has_admins": Collection(db, models.AdminUser).count() > 0,
        "is_admin": is_admin(db, current_user.id),
    }


@router.post("/setup")
def become_admin(
    payload: schemas.AdminSetupRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Grant the current user admin rights.

    The caller must supply the shared setup code. Users who are already
    admins get a no-op answer.

    Raises
    ------
    HTTPException
        - 403 if the setup code is wrong.
    """
    if is_admin(db, current_user.id):
        return {"detail": "Already admin"}

    if payload.code != ADMIN_SETUP_CODE:
        logger.warning("Invalid admin setup code from user {}", current_user.id)
        raise HTTPException(status_code=403, detail="Invalid admin setup code")

    Collection(db, models.AdminUser).create(user_id=current_user.id, role="admin")
    logger.info("User {} granted admin access", current_user.id)
    return {"detail": "Admin access granted"}


# ----- Dashboard -----
@router.get("/stats", response_model=schemas.DashboardStats)
def dashboard_stats(
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """
    Fleet and revenue figures for the admin dashboard.

    Revenue counts approved and completed bookings; monthly revenue is
    limited to bookings created in the current calendar month.
    """
    bikes = Collection(db, models.Bike).list()
    bookings = Collection(db, models.Booking).list()

    available = [b for b in bikes if b.is_available]
    earning = [b for b in bookings if b.status in REVENUE_STATUSES]
    now = datetime.utcnow()
    this_month = [
        b for b in earning
        if b.created_at.year == now.year and b.created_at.month == now.month
    ]

    return {
        "total_bikes": len(bikes),
        "available_bikes": len(available),
        "availability_rate": int(len(available) * 100 / len(bikes) + 0.5) if bikes else 0,
        "total_bookings": len(bookings),
        "pending_bookings": sum(1 for b in bookings if b.status == "pending"),
        "total_revenue": round(sum(b.total_amount for b in earning), 2),
        "monthly_revenue": round(sum(b.total_amount for b in this_month), 2),
        "unique_customers": len({b.user_id for b in bookings}),
    }


# ----- Inventory -----
@router.get("/bikes", response_model=List[schemas.BikeOut])
def list_all_bikes(
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """Every bike, available or not, newest first."""
    return Collection(db, models.Bike).list(order_by={"created_at": "desc"})


@router.post("/bikes", response_model=schemas.BikeOut)
def create_bike(
    bike_in: schemas.BikeCreate,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """
    Add a bike to the fleet.

    Rates must be positive and the type one of the known bike types.
    """
    bike = Collection(db, models.Bike).create(**bike_in.model_dump())
    logger.info("Bike {} added: {}", bike.id, bike.name)
    return bike


@router.patch("/bikes/{bike_id}", response_model=schemas.BikeOut)
def update_bike(
    bike_id: int,
    bike_update: schemas.BikeUpdate,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """
    Update details of an existing bike.

    Raises a 404 error if the bike is not found.
    """
    data = bike_update.model_dump(exclude_unset=True)
    # only the optional columns can be cleared
    data = {k: v for k, v in data.items() if v is not None or k in ("image_url", "bike_number")}
    bike = Collection(db, models.Bike).update(bike_id, **data)
    if not bike:
        raise HTTPException(status_code=404, detail="Bike not found")
    return bike


@router.delete("/bikes/{bike_id}")
def delete_bike(
    bike_id: int,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """
    Permanently remove a bike.

    Bookings that reference it are left in place.
    """
    if not Collection(db, models.Bike).delete(bike_id):
        raise HTTPException(status_code=404, detail="Bike not found")
    logger.info("Bike {} deleted", bike_id)
    return {"detail": "Bike deleted"}


# ----- Booking management -----
@router.get("/bookings", response_model=List[schemas.BookingDetail])
def list_all_bookings(
    status: Optional[schemas.BookingStatus] = None,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """All bookings, newest first, optionally narrowed to one status."""
    where = {"status": status.value} if status is not None else None
    bookings = Collection(db, models.Booking).list(where=where, order_by={"created_at": "desc"})
    return with_bikes(db, bookings, admin=True)


def _get_booking_or_404(bookings: Collection, booking_id: int) -> models.Booking:
    booking = bookings.get(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


def _decide(db: Session, booking_id: int, action: str) -> dict:
    bookings = Collection(db, models.Booking)
    _get_booking_or_404(bookings, booking_id)

    new_status = "approved" if action == "approve" else "rejected"
    booking = bookings.update(booking_id, status=new_status)
    logger.info("Booking {} {}", booking_id, new_status)

    bike = Collection(db, models.Bike).get(booking.bike_id)
    message = send_booking_notifications(booking, bike.name if bike else UNKNOWN_BIKE, action)
    return {"booking": booking, "notified": True, "message": message}


@router.post("/bookings/{booking_id}/approve", response_model=schemas.BookingActionResult)
def approve_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """Approve a booking and notify the customer."""
    return _decide(db, booking_id, "approve")


@router.post("/bookings/{booking_id}/reject", response_model=schemas.BookingActionResult)
def reject_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """Reject a booking and notify the customer."""
    return _decide(db, booking_id, "reject")


@router.patch("/bookings/{booking_id}/status", response_model=schemas.BookingOut)
def set_booking_status(
    booking_id: int,
    payload: schemas.BookingStatusUpdate,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """
    Overwrite a booking's status.

    Any valid status may be written regardless of the current one.
    """
    bookings = Collection(db, models.Booking)
    _get_booking_or_404(bookings, booking_id)
    return bookings.update(booking_id, status=payload.status.value)


@router.patch("/bookings/{booking_id}/delivery", response_model=schemas.BookingOut)
def set_delivery_status(
    booking_id: int,
    payload: schemas.DeliveryUpdate,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """Record delivery progress; ``delivered_at`` is set only when delivered."""
    bookings = Collection(db, models.Booking)
    _get_booking_or_404(bookings, booking_id)
    delivered = payload.delivery_status == schemas.DeliveryStatus.delivered
    return bookings.update(
        booking_id,
        delivery_status=payload.delivery_status.value,
        delivered_at=datetime.utcnow() if delivered else None,
    )


@router.patch("/bookings/{booking_id}/return", response_model=schemas.BookingOut)
def set_return_status(
    booking_id: int,
    payload: schemas.ReturnUpdate,
    db: Session = Depends(get_db),
    _: models.User = Depends(get_admin_user),
):
    """Record whether the bike came back; ``returned_at`` is set only when returned."""
    bookings = Collection(db, models.Booking)
    _get_booking_or_404(bookings, booking_id)
    returned = payload.return_status == schemas.ReturnStatus.returned
    return bookings.update(
        booking_id,
        return_status=payload.return_status.value,
        returned_at=datetime.utcnow() if returned else None,
    )
