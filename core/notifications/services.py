"""
Notification Service

Creates in-app notifications. Errors propagate to the caller; engines send
through SideEffectOutbox, which catches and logs them.
"""
import logging

from core.notifications.models import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Service layer for in-app notifications"""

    @staticmethod
    def send(recipient, type, title, message='', link='', related_employee=None,
             related_run_id=None) -> Notification:
        """
        Deliver a notification to one user.

        Args:
            recipient: User receiving the notification
            type: Notification type code, e.g. 'offboarding_task_assigned'
            title: Short title
            message: Body text
            link: Relative UI link
            related_employee: Employee the notification concerns
            related_run_id: Offboarding run id

        Returns:
            Notification
        """
        if recipient is None:
            raise ValueError("Notification recipient is required")

        notification = Notification.objects.create(
            recipient=recipient,
            type=type,
            title=title,
            message=message,
            link=link or '',
            related_employee=related_employee,
            related_run_id=related_run_id,
        )
        logger.debug(f"Notification {notification.pk} ({type}) sent to user {recipient.pk}")
        return notification
