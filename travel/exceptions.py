# travel/exceptions.py

class ApiError(Exception):
    """Raised when the backend API cannot be reached or answers with an error."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self):
        return self.message


class SerializationError(ValueError):
    """Raised for JSON payloads whose reference graph cannot be rebuilt."""
