"""
Exception classes for bracket generation and tournament storage.
"""


class BracketError(Exception):
    """
    Base exception for all bracket-related errors
    """
    status_code = 400

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code or "BRACKET_ERROR"

    def to_dict(self):
        """Convert exception to dictionary for JSON responses"""
        return {
            'error': self.code,
            'message': self.message
        }


class PreconditionError(BracketError):
    """
    Raised when the participant list handed to a generator is unusable
    """
    def __init__(self, message: str, field: str = None):
        super().__init__(message, "PRECONDITION_ERROR")
        self.field = field

    def to_dict(self):
        result = super().to_dict()
        if self.field:
            result['field'] = self.field
        return result


class NotFoundError(BracketError):
    """
    Raised when a tournament or match does not exist
    """
    status_code = 404

    def __init__(self, resource: str, identifier):
        super().__init__(f"{resource} '{identifier}' not found", "NOT_FOUND")
        self.resource = resource
        self.identifier = identifier


class ResultError(BracketError):
    """
    Raised when a match result cannot be applied
    """
    status_code = 409

    def __init__(self, message: str, match_id: str = None):
        super().__init__(message, "RESULT_ERROR")
        self.match_id = match_id

    def to_dict(self):
        result = super().to_dict()
        if self.match_id:
            result['match_id'] = self.match_id
        return result
