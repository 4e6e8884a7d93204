"""
newsdesk.

Data-entry forms for the newstream content backend.

- core/: Configuration, logging, exceptions, retry policy, middleware
- client/: Async HTTP client for the content backend
- schemas/: Form state, backend entities, API envelopes
- services/: Tag directory, record and tag submission, notifications
- components/: Form lifecycle, tag dropdown, analytics beacon
- web/: FastAPI pages and JSON endpoints
"""

__version__ = "0.1.0"
