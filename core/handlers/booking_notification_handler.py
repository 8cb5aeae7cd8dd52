"""
Handler for booking lifecycle events.

Turns each event into customer (and, for new requests, administrator) email.
Delivery runs on a thread pool so a slow or failing gateway never holds up
the command that published the event.
"""

import logging
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Callable

from clients.email_client import EmailGatewayClient, EmailGatewayError
from core.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingEvent,
    WorkerAssigned,
)
from utils.timezone import format_date_for_display, format_time_for_display

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """One outgoing email."""
    to: str
    subject: str
    body: str
    reference: str


def _schedule_line(booking) -> str:
    date = format_date_for_display(booking.scheduled_date)
    time = format_time_for_display(booking.scheduled_time)
    return f"{booking.service_name} on {date} at {time}, {booking.area}"


def _customer_message(event: BookingEvent) -> tuple[str, str] | None:
    booking = event.booking
    schedule = _schedule_line(booking)

    if isinstance(event, BookingCreated):
        return (
            "Booking request received",
            f"We received your request for {schedule}. "
            f"We'll confirm it shortly.",
        )
    if isinstance(event, BookingConfirmed):
        return (
            "Booking confirmed",
            f"Your booking for {schedule} is confirmed. "
            f"You will receive a worker assignment shortly.",
        )
    if isinstance(event, WorkerAssigned):
        worker = event.worker
        label = worker.display_label if worker else booking.assigned_worker_name
        return (
            f"Worker {booking.assigned_worker_name} assigned",
            f"{label} has been assigned to your booking for {schedule}.",
        )
    if isinstance(event, BookingCompleted):
        return (
            "Booking completed",
            f"Your booking for {schedule} has been marked as completed. Thank you!",
        )
    if isinstance(event, BookingCancelled):
        if event.cancelled_by == "admin":
            return (
                "Booking rejected",
                f"Unfortunately we can't take your booking for {schedule}.",
            )
        return (
            "Booking cancelled",
            f"Your booking for {schedule} has been cancelled.",
        )
    return None


def compose_notifications(event: BookingEvent, admin_email: str | None = None) -> list[Notification]:
    """
    Build the emails an event should produce.

    Args:
        event: Published lifecycle event
        admin_email: Administrator inbox for new-request alerts, if any

    Returns:
        Notifications to deliver; empty when there is nobody to tell
    """
    booking = event.booking
    reference = str(booking.id)
    notifications = []

    message = _customer_message(event)
    if message and booking.customer_email:
        subject, body = message
        notifications.append(Notification(booking.customer_email, subject, body, reference))

    if isinstance(event, BookingCreated) and admin_email:
        who = booking.customer_name or str(booking.customer_id)
        notifications.append(Notification(
            admin_email,
            "New booking request",
            f"{who} requested {_schedule_line(booking)}. Address: {booking.address}",
            reference,
        ))

    return notifications


def handle_booking_event(
    email_client: EmailGatewayClient,
    executor: Executor,
    admin_email: str | None = None,
) -> Callable:
    """
    Factory that returns a handler for every booking event kind.

    Dependencies are captured at wiring time via closure.

    Args:
        email_client: Gateway used for delivery
        executor: Pool that runs deliveries off the publishing thread
        admin_email: Administrator inbox for new-request alerts

    Returns:
        Handler callable; subscribe it with EventBus.subscribe_all
    """

    def deliver(notification: Notification) -> None:
        try:
            email_client.send_email(
                to=notification.to,
                subject=notification.subject,
                body=notification.body,
                reference=notification.reference,
            )
        except EmailGatewayError as e:
            logger.error(
                "Notification '%s' to %s for booking %s failed: %s",
                notification.subject, notification.to, notification.reference, e,
            )

    def handler(event: BookingEvent) -> list[Future]:
        return [executor.submit(deliver, n) for n in compose_notifications(event, admin_email)]

    return handler
