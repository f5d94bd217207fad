from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from .. import schemas, models
from ..booking_views import with_bikes
from ..deps import get_db, get_current_user, is_admin
from ..pricing import calculate_total, calculate_end_time
from ..store import Collection

router = APIRouter(prefix="/bookings", tags=["bookings"])

CANCELLABLE_STATUSES = ("pending", "approved")


@router.post("/", response_model=schemas.BookingCreated)
def create_booking(
    booking_in: schemas.BookingCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Book a bike for the current user.

    - **Instant** bookings start now unless a start time is given and are
      approved straight away.
    - **Pre-reservations** need a start time that is not in the past and
      wait for an admin to approve them.

    The end time and total are derived from the duration and the bike's
    hourly or daily rate. Availability is not checked.

    Raises
    ------
    HTTPException
        - 404 if the bike does not exist.
        - 400 if a pre-reservation has no start time.
        - 400 if the start time is in the past.
    """
    bike = Collection(db, models.Bike).get(booking_in.bike_id)
    if not bike:
        raise HTTPException(status_code=404, detail="Bike not found")

    now = datetime.utcnow()
    instant = booking_in.booking_type == schemas.BookingType.instant
    if booking_in.start_time is None and not instant:
        raise HTTPException(status_code=400, detail="Pre-reservations need a start time")
    if booking_in.start_time is not None and booking_in.start_time < now:
        raise HTTPException(status_code=400, detail="Start time cannot be in the past")
    start_time = booking_in.start_time or now

    duration_type = booking_in.duration_type.value
    booking = Collection(db, models.Booking).create(
        user_id=current_user.id,
        bike_id=bike.id,
        booking_type=booking_in.booking_type.value,
        start_time=start_time,
        end_time=calculate_end_time(start_time, booking_in.duration, duration_type),
        total_amount=calculate_total(bike, booking_in.duration, duration_type),
        status="approved" if instant else "pending",
        customer_name=booking_in.customer_name or current_user.display_name or current_user.username,
        customer_email=booking_in.customer_email or current_user.email,
        customer_phone=booking_in.customer_phone,
        notes=booking_in.notes,
    )
    logger.info(
        "Booking {} created: user={} bike={} type={} total={:.2f}",
        booking.id, current_user.id, bike.id, booking.booking_type, booking.total_amount,
    )

    message = (
        "Your bike is ready for pickup!"
        if instant
        else "Your booking request has been submitted for approval."
    )
    return {"booking": booking, "message": message}


@router.get("/me", response_model=List[schemas.BookingDetail])
def list_my_bookings(
    status: Optional[schemas.BookingStatus] = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    List the current user's bookings, newest first.

    Each booking carries a summary of its bike; bookings for bikes that
    have since been removed show up as "Unknown Bike".
    """
    where = {"user_id": current_user.id}
    if status is not None:
        where["status"] = status.value
    bookings = Collection(db, models.Booking).list(where=where, order_by={"created_at": "desc"})
    return with_bikes(db, bookings)


@router.get("/me/summary", response_model=schemas.BookingSummary)
def my_booking_summary(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Counts per status and the total spent across all of the user's bookings."""
    bookings = Collection(db, models.Booking).list(where={"user_id": current_user.id})
    return {
        "total": len(bookings),
        "active": sum(1 for b in bookings if b.status == "approved"),
        "pending": sum(1 for b in bookings if b.status == "pending"),
        "completed": sum(1 for b in bookings if b.status == "completed"),
        "total_spent": round(sum(b.total_amount for b in bookings), 2),
    }


@router.get("/{booking_id}", response_model=schemas.BookingDetail)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Get one booking. Only its owner or an admin may look at it.
    """
    booking = Collection(db, models.Booking).get(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    admin = is_admin(db, current_user.id)
    if booking.user_id != current_user.id and not admin:
        raise HTTPException(status_code=403, detail="Not allowed to view this booking")
    return with_bikes(db, [booking], admin=admin)[0]


@router.post("/{booking_id}/cancel", response_model=schemas.BookingOut)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Cancel one of your own bookings while it is pending or approved.
    """
    bookings = Collection(db, models.Booking)
    booking = bookings.get(booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    if booking.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not allowed to cancel this booking")
    if booking.status not in CANCELLABLE_STATUSES:
        raise HTTPException(status_code=400, detail=f"Cannot cancel a {booking.status} booking")

    logger.info("Booking {} cancelled by user {}", booking_id, current_user.id)
    return bookings.update(booking_id, status="cancelled")
