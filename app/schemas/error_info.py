import inspect
import os
import traceback
from typing import Optional

from pydantic import BaseModel

from app.core.exceptions import ConnectionFailureCategory, DatabaseConnectionError


class ErrorInfo(BaseModel):
    message: str
    detailed_message: Optional[str] = None
    file_name: Optional[str] = None
    line_number: Optional[int] = None
    category: Optional[ConnectionFailureCategory] = None

    @classmethod
    def create(
        cls,
        message: str,
        detailed_message: Optional[str] = None,
        category: Optional[ConnectionFailureCategory] = None,
    ) -> "ErrorInfo":
        """Build a diagnostic pointing at the caller's location."""
        caller = inspect.currentframe().f_back
        return cls(
            message=message,
            detailed_message=detailed_message,
            file_name=os.path.basename(caller.f_code.co_filename),
            line_number=caller.f_lineno,
            category=category,
        )

    @classmethod
    def from_exception(cls, message: str, exc: BaseException) -> "ErrorInfo":
        """Build a diagnostic located where ``exc`` was raised."""
        file_name = None
        line_number = None
        frames = traceback.extract_tb(exc.__traceback__) if exc.__traceback__ else []
        if frames:
            origin = frames[-1]
            file_name = os.path.basename(origin.filename)
            line_number = origin.lineno

        if isinstance(exc, DatabaseConnectionError):
            return cls(
                message=message,
                detailed_message=exc.detailed_message,
                file_name=file_name,
                line_number=line_number,
                category=exc.category,
            )

        return cls(
            message=message,
            detailed_message=str(exc),
            file_name=file_name,
            line_number=line_number,
        )
