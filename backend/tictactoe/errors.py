"""
Error kinds raised by the game services and rendered by the HTTP layer
"""


class GameError(Exception):
    """Base class for errors that are reported back to the client"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(GameError):
    """Malformed, out-of-range or semantically invalid input"""
    status_code = 400


class UnauthorizedError(GameError):
    """Missing or unknown session token"""
    status_code = 401


class ForbiddenError(GameError):
    """Authenticated, but not a participant of the targeted room"""
    status_code = 403


class NotFoundError(GameError):
    """Unknown user, room or join code"""
    status_code = 404


class ConflictError(GameError):
    """Duplicate username or full room"""
    status_code = 409


class StoreError(Exception):
    """Raised by a durable user store when loading or saving fails"""
