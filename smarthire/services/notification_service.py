"""
Notification delivery for workflow events.

Each event is stored as a Notification record for the recipient and then
mailed to them if SMTP is configured.
"""

from typing import Optional

from smarthire.core.exceptions import NotFoundError
from smarthire.data.models import Application, Job, Notification, User
from smarthire.utils.constants import ApplicationStage, NotificationType
from smarthire.utils.logger import LoggerMixin

from .email_sender import EmailSender


class NotificationService(LoggerMixin):
    """Records notifications and emails them to users."""

    def __init__(self, notification_repository=None, user_repository=None, email_sender=None):
        self._notification_repository = notification_repository
        self._user_repository = user_repository
        self.email_sender = email_sender or EmailSender()

    @property
    def notification_repository(self):
        if self._notification_repository is None:
            from smarthire.data.repositories import get_notification_repository

            self._notification_repository = get_notification_repository()
        return self._notification_repository

    @property
    def user_repository(self):
        if self._user_repository is None:
            from smarthire.data.repositories import get_user_repository

            self._user_repository = get_user_repository()
        return self._user_repository

    def notify(self, recipient: User, message: str, notification_type: NotificationType) -> Notification:
        """Store a notification for a user and try to email it."""
        notification = self.notification_repository.create(
            Notification(
                user_id=recipient.id,
                message=message,
                type=notification_type,
            )
        )
        self.logger.debug(f"Notification {notification.id} stored for {recipient.id}")

        self.email_sender.send(recipient.email, recipient.name, message, notification_type.value)
        return notification

    def notify_new_application(self, job: Job, applicant: User) -> Notification:
        """Tell the job owner a candidate applied."""
        owner = self.user_repository.get_by_id(job.posted_by)
        if owner is None:
            raise NotFoundError("user", job.posted_by)
        message = f"New application for {job.title} from {applicant.name}"
        return self.notify(owner, message, NotificationType.APPLICATION_UPDATE)

    def notify_stage_changed(
        self,
        application: Application,
        job: Job,
        stage: ApplicationStage | str,
    ) -> Notification:
        """Tell the applicant their application moved to a new stage."""
        stage = ApplicationStage.parse(stage)
        applicant = self.user_repository.get_by_id(application.applicant_id)
        if applicant is None:
            raise NotFoundError("user", application.applicant_id)
        message = f"Your application for {job.title} has moved to {stage.label}"
        return self.notify(applicant, message, NotificationType.for_stage(stage))


# Singleton instance
_notification_service: Optional[NotificationService] = None


def get_notification_service() -> NotificationService:
    """Get the notification service singleton instance."""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
