"""Typed failures raised by the service layer.

Each carries the HTTP status it maps to so the API can render it without a
per-route translation table.
"""
from __future__ import annotations


class ServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(ServiceError):
    """Caller lacks the required role or targets a protected account."""

    status_code = 403


class ValidationError(ServiceError):
    """Input conflicts with stored data (duplicate email, invalid role)."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404
