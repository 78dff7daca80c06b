"""
Custom exceptions for the goal tracker application.
Services raise these; routes and the app-level handlers turn them into HTTP errors.
"""


class GoalTrackerException(Exception):
    """Base exception for goal tracker application"""
    pass


class GoalNotFoundException(GoalTrackerException):
    """Raised when a personal goal is not found"""
    def __init__(self, goal_id: str, user_id: str):
        self.goal_id = goal_id
        self.user_id = user_id
        super().__init__(f"Goal {goal_id} not found for user {user_id}")


class TimeEntryNotFoundException(GoalTrackerException):
    """Raised when a time entry is not found"""
    def __init__(self, entry_id: str):
        self.entry_id = entry_id
        super().__init__(f"Time entry with ID {entry_id} not found")


class StorageException(GoalTrackerException):
    """Raised when a document cannot be read or written"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Storage {operation} failed: {details}")


class ValidationException(GoalTrackerException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
