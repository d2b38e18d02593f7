"""
Pydantic data models and schemas for SmartHire.

This module provides all data models used throughout the application,
including database documents, embedded models, and input schemas.
"""

# Base models
from .base import BaseDocument, EmbeddedModel, PyObjectId, TimestampMixin, utc_now

# Application models
from .application import (
    Application,
    ApplicationCreate,
    InterviewDetails,
    OfferDetails,
    StageChangeRequest,
    StageEntry,
)

# Job models
from .job import Job, JobCreate

# User models
from .user import CandidateProfile, User

# Notification models
from .notification import Notification

__all__ = [
    # Base
    "BaseDocument",
    "EmbeddedModel",
    "PyObjectId",
    "TimestampMixin",
    "utc_now",
    # Application
    "Application",
    "ApplicationCreate",
    "InterviewDetails",
    "OfferDetails",
    "StageChangeRequest",
    "StageEntry",
    # Job
    "Job",
    "JobCreate",
    # User
    "CandidateProfile",
    "User",
    # Notification
    "Notification",
]
