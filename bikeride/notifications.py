from loguru import logger

APPROVE_MESSAGE = (
    "Great news! Your bike rental for {bike_name} has been approved. "
    "Pickup details will be sent shortly."
)
REJECT_MESSAGE = (
    "We're sorry, but your bike rental request for {bike_name} has been declined. "
    "Please contact us for more information."
)


def build_message(bike_name: str, action: str) -> str:
    if action == "approve":
        return APPROVE_MESSAGE.format(bike_name=bike_name)
    if action == "reject":
        return REJECT_MESSAGE.format(bike_name=bike_name)
    raise ValueError(f"Unknown booking action '{action}'")


def send_booking_notifications(booking, bike_name: str, action: str) -> str:
    """
    Tell the customer about an approval or rejection.

    Delivery is stubbed: the WhatsApp and email messages are only logged.
    """
    message = build_message(bike_name, action)
    logger.info("Sending WhatsApp to {}: {}", booking.customer_phone, message)
    logger.info("Sending Email to {}: {}", booking.customer_email, message)
    return message
