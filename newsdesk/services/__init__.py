"""
Services.

Tag directory loading, record and tag submission, and the notification
queue the forms render.
"""

from newsdesk.services.notifications import NotificationCenter
from newsdesk.services.record_submission import RecordSubmissionService
from newsdesk.services.tag_creation import TagCreationService
from newsdesk.services.tag_directory import TagDirectory

__all__ = [
    "NotificationCenter",
    "RecordSubmissionService",
    "TagCreationService",
    "TagDirectory",
]
