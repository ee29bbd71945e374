class UserServiceError(Exception):
    """Base class for errors raised by the user service"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(UserServiceError):
    """Malformed input: bad name, email, password or role"""


class ConflictError(UserServiceError):
    """Another user already holds the email"""


class MethodNotAllowedError(UserServiceError):
    """Role not permitted through self-registration"""
