"""
Application package initializer.

The project is organised into logical pieces: ``core`` holds
configuration, persistence and security primitives, ``schemas`` the
pydantic request/response models, ``services`` the business logic per
domain (events, trips, interviews, payments, ...) and ``api`` the
versioned HTTP routers.
"""

from .main import app  # noqa: F401
