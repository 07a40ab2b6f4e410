"""Push notifications for temperature reminders.

Delivery goes through Firebase Cloud Messaging when firebase-admin is
installed and initialised. Without it every call returns a message
explaining that notifications are unavailable; nothing here raises.
"""

import logging
from typing import Dict, Optional

from foodtrace.schemas.alerts import NotificationResult, Reminder

logger = logging.getLogger(__name__)

REMINDER_TOPIC = "temperature-reminders"

UNAVAILABLE_MESSAGE = (
    "Notifications are not available on this installation. "
    "Reminders are still shown on the dashboard."
)


class NotificationService:
    """Send reminder notifications via Firebase Cloud Messaging (FCM v1 API)."""

    def __init__(self, topic: str = REMINDER_TOPIC):
        self.topic = topic
        self._initialized = False
        self._app = None

    @property
    def available(self) -> bool:
        return self._initialized

    def initialize(self, credentials_path: Optional[str] = None):
        """Initialize Firebase Admin SDK."""
        if self._initialized:
            return
        try:
            import firebase_admin
            from firebase_admin import credentials as fb_credentials

            if credentials_path:
                cred = fb_credentials.Certificate(credentials_path)
                self._app = firebase_admin.initialize_app(cred)
            else:
                self._app = firebase_admin.initialize_app()
            self._initialized = True
            logger.info("Firebase Admin SDK initialized")
        except ImportError:
            logger.info("firebase-admin not installed, push notifications disabled")
        except Exception as e:
            logger.warning(f"Firebase initialization failed: {e}. Push notifications disabled.")

    def request_permission(self) -> NotificationResult:
        """Report whether reminders can be pushed to the user."""
        if not self._initialized:
            return NotificationResult(delivered=False, message=UNAVAILABLE_MESSAGE)
        return NotificationResult(
            delivered=True, message=f"Reminders are sent to topic '{self.topic}'"
        )

    def notify(
        self, title: str, body: str, data: Optional[Dict[str, str]] = None
    ) -> NotificationResult:
        """Send a notification to the reminder topic."""
        if not self._initialized:
            logger.debug("Firebase not initialized, skipping push notification")
            return NotificationResult(delivered=False, message=UNAVAILABLE_MESSAGE)
        try:
            from firebase_admin import messaging

            message = messaging.Message(
                notification=messaging.Notification(title=title, body=body),
                data=data or {},
                topic=self.topic,
            )
            response = messaging.send(message)
            logger.info(f"Topic notification sent to '{self.topic}': {response}")
            return NotificationResult(delivered=True, message="Notification sent")
        except Exception as e:
            logger.error(f"Topic notification failed: {e}")
            return NotificationResult(delivered=False, message=f"Notification failed: {e}")

    def notify_reminder(self, reminder: Reminder) -> NotificationResult:
        label = "morning" if reminder.slot.value == "MORNING" else "evening"
        return self.notify(
            "Temperature reading due",
            f"The {label} cold-chain reading has not been recorded yet.",
            data={"type": reminder.type, "slot": reminder.slot.value},
        )


notifications = NotificationService()
