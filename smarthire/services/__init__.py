"""
Collaborator services used by the workflow engine.

- resume_storage: PDF resume uploads on disk
- notification_service: Stored notifications plus email delivery
- email_sender: SMTP delivery
- access: Role checks for caller-facing operations
"""

from .access import require_role
from .email_sender import EmailSender
from .notification_service import NotificationService, get_notification_service
from .resume_storage import ResumeStorage, get_resume_storage

__all__ = [
    "require_role",
    "EmailSender",
    "NotificationService",
    "get_notification_service",
    "ResumeStorage",
    "get_resume_storage",
]
