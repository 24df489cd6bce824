# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Error taxonomy shared by the services and the HTTP layer."""

from fastapi import status


class RBACError(Exception):
    """Base class for all access-control errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RBACError):
    """Malformed input to an administrative call."""

    status_code = 422
    default_message = "Validation failed"


class ForbiddenError(RBACError):
    """The caller is not allowed to perform the operation."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class NotFoundError(RBACError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(RBACError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"
