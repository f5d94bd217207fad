from datetime import datetime, timedelta

MIN_DURATION = 1
MAX_DURATION = 30


def booking_rate(bike, duration_type: str) -> float:
    """Hourly rate for hour-based rentals, daily rate for day-based ones."""
    if duration_type == "hours":
        return bike.hourly_rate
    if duration_type == "days":
        return bike.daily_rate
    raise ValueError(f"Unknown duration type '{duration_type}'")


def _check_duration(duration: int):
    if not MIN_DURATION <= duration <= MAX_DURATION:
        raise ValueError(f"Duration must be between {MIN_DURATION} and {MAX_DURATION}")


def calculate_total(bike, duration: int, duration_type: str) -> float:
    """
    Price of a rental: rate times duration.

    :param bike: anything with ``hourly_rate`` and ``daily_rate``
    :param duration: number of hours or days (1-30)
    :param duration_type: ``"hours"`` or ``"days"``
    :return: total rounded to cents
    """
    _check_duration(duration)
    return round(booking_rate(bike, duration_type) * duration, 2)


def calculate_end_time(start: datetime, duration: int, duration_type: str) -> datetime:
    _check_duration(duration)
    if duration_type == "hours":
        return start + timedelta(hours=duration)
    if duration_type == "days":
        return start + timedelta(days=duration)
    raise ValueError(f"Unknown duration type '{duration_type}'")
