"""Best-effort participant notifications.

Delivery never raises into the caller: every failure is logged and dropped.
Messages are rendered on the calling thread so that delivery threads never
touch ORM objects.
"""
from __future__ import annotations

import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from community_events.config import Settings
from community_events.models.event import Event
from community_events.models.user import User

logger = logging.getLogger(__name__)


class NotificationKind(str, enum.Enum):
    volunteer_registered = "volunteer_registered"
    volunteer_approved = "volunteer_approved"


@dataclass(slots=True)
class Message:
    to_email: str
    subject: str
    body: str


_TEMPLATES = {
    NotificationKind.volunteer_registered: (
        "Volunteer Registration Confirmation for: {title}",
        "Hello {name},\n\n"
        "Thank you for volunteering for the event:\n\n"
        "Event: {title}\n"
        "Date: {date}\n"
        "Time: {time}\n"
        "Location: {location}\n\n"
        "Your volunteer registration is pending approval. "
        "You will be notified once it's approved.\n\n"
        "Best regards,\n"
        "{app_name} Team",
    ),
    NotificationKind.volunteer_approved: (
        "Volunteer Application Approved for: {title}",
        "Hello {name},\n\n"
        "Great news! Your volunteer application for the following event has been approved:\n\n"
        "Event: {title}\n"
        "Date: {date}\n"
        "Time: {time}\n"
        "Location: {location}\n\n"
        "Thank you for your willingness to help make this event a success!\n\n"
        "Best regards,\n"
        "{app_name} Team",
    ),
}


def render(recipient: User, kind: NotificationKind, event: Event, app_name: str) -> Message:
    subject_tpl, body_tpl = _TEMPLATES[kind]
    fields = {
        "name": recipient.name,
        "title": event.title,
        "date": event.start_time_utc.strftime("%b %d, %Y"),
        "time": event.start_time_utc.strftime("%H:%M"),
        "location": event.location,
        "app_name": app_name,
    }
    return Message(
        to_email=recipient.email,
        subject=subject_tpl.format(**fields),
        body=body_tpl.format(**fields),
    )


class Notifier:
    """Fire-and-forget notifier; subclasses implement ``deliver``."""

    def __init__(self, app_name: str = "Community Events"):
        self.app_name = app_name

    def notify(self, recipient: User, kind: NotificationKind, event: Event) -> None:
        try:
            message = render(recipient, kind, event, self.app_name)
            self.deliver(message)
        except Exception:
            logger.exception("Failed to send %s notification for event %s", kind.value, event.event_id)

    def deliver(self, message: Message) -> None:
        raise NotImplementedError

    def shutdown(self, wait: bool = False) -> None:
        """Release delivery resources; nothing to release by default."""


class LoggingNotifier(Notifier):
    """Used when no mail provider is configured: logs what would be sent."""

    def deliver(self, message: Message) -> None:
        logger.info("Mail not configured; would send '%s' to %s", message.subject, message.to_email)


class SendGridNotifier(Notifier):
    """Sends plain-text mail through SendGrid on a small worker pool."""

    def __init__(self, api_key: str, from_email: str, app_name: str = "Community Events", max_workers: int = 2):
        super().__init__(app_name)
        self.api_key = api_key
        self.from_email = from_email
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notifier")

    def deliver(self, message: Message) -> None:
        self._executor.submit(self._send, message)

    def _send(self, message: Message) -> None:
        mail = Mail(
            from_email=self.from_email,
            to_emails=message.to_email,
            subject=message.subject,
            plain_text_content=message.body,
        )
        try:
            resp = SendGridAPIClient(self.api_key).send(mail)
            if resp.status_code < 200 or resp.status_code >= 300:
                logger.error("SendGrid rejected mail to %s with status %s", message.to_email, resp.status_code)
                return
            logger.info("Sent '%s' to %s", message.subject, message.to_email)
        except Exception:
            logger.exception("Failed to send mail to %s", message.to_email)

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)


def build_notifier(settings: Settings) -> Notifier:
    api_key = settings.SENDGRID_API_KEY.strip()
    if api_key:
        return SendGridNotifier(api_key, settings.SENDGRID_FROM_EMAIL, app_name=settings.APP_NAME)
    return LoggingNotifier(app_name=settings.APP_NAME)
