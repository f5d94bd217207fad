from typing import List

from sqlalchemy.orm import Session

from . import models, schemas

UNKNOWN_BIKE = "Unknown Bike"

_STATUS_LABELS = {
    "approved": "Approved",
    "pending": "Pending Approval",
    "rejected": "Rejected",
    "completed": "Completed",
    "cancelled": "Cancelled",
}


def status_label(status: str, admin: bool = False) -> str:
    """Human-readable status. Admins see a plain "Pending"."""
    if admin and status == "pending":
        return "Pending"
    return _STATUS_LABELS.get(status, status)


def with_bikes(db: Session, bookings: List[models.Booking], admin: bool = False) -> List[schemas.BookingDetail]:
    """
    Join each booking with a summary of its bike.

    Bikes are loaded in one query; bookings whose bike was deleted come
    back with ``bike=None`` and the "Unknown Bike" name.
    """
    bike_ids = {b.bike_id for b in bookings}
    bikes = {}
    if bike_ids:
        for bike in db.query(models.Bike).filter(models.Bike.id.in_(bike_ids)).all():
            bikes[bike.id] = bike

    details = []
    for booking in bookings:
        bike = bikes.get(booking.bike_id)
        details.append(
            schemas.BookingDetail(
                **schemas.BookingOut.model_validate(booking).model_dump(),
                bike=schemas.BikeSummary.model_validate(bike) if bike else None,
                bike_name=bike.name if bike else UNKNOWN_BIKE,
                status_label=status_label(booking.status, admin=admin),
            )
        )
    return details
