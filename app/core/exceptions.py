# app/core/exceptions.py
import enum
from typing import List, Optional


class ConnectionFailureCategory(str, enum.Enum):
    authentication = "authentication"
    network = "network"
    identity_configuration = "identity_configuration"
    configuration = "configuration"
    unknown = "unknown"


class ExpenseAppError(Exception):
    """Base class for every error raised by the expense service."""


class DatabaseConnectionError(ExpenseAppError):
    def __init__(
        self,
        message: str,
        category: ConnectionFailureCategory = ConnectionFailureCategory.unknown,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.hint = hint

    @property
    def detailed_message(self) -> str:
        return self.hint or str(self)


class OperationError(ExpenseAppError):
    def __init__(self, procedure: str, message: str):
        super().__init__(f"{procedure} failed: {message}")
        self.procedure = procedure


class ValidationError(ExpenseAppError):
    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(message)
        self.details = details or []


class AssistantNotConfiguredError(ExpenseAppError):
    pass
