# app/db/procedures.py

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.constants import PROCEDURES
from app.core.exceptions import OperationError
from app.db.session import ConnectionProvider

logger = logging.getLogger(__name__)


def build_call(procedure: str, params: Dict[str, Any]):
    """Render ``SELECT * FROM fn(:a, :b)`` for a known procedure."""
    if procedure not in PROCEDURES:
        raise OperationError(procedure, "unknown stored procedure")

    function_name, parameter_names = PROCEDURES[procedure]
    unexpected = set(params) - set(parameter_names)
    if unexpected:
        raise OperationError(procedure, f"unexpected parameters: {sorted(unexpected)}")

    placeholders = ", ".join(f":{name}" for name in parameter_names)
    bound = {name: params.get(name) for name in parameter_names}
    return text(f"SELECT * FROM {function_name}({placeholders})"), bound


class ProcedureGateway:
    """Calls the named stored procedures behind the expense database."""

    def __init__(self, provider: ConnectionProvider):
        self.provider = provider

    def fetch_all(self, procedure: str, **params) -> List[Dict[str, Any]]:
        statement, bound = build_call(procedure, params)
        with self.provider.acquire() as conn:
            try:
                result = conn.execute(statement, bound)
                return [dict(row) for row in result.mappings()]
            except SQLAlchemyError as e:
                raise OperationError(procedure, str(e)) from e

    def fetch_one(self, procedure: str, **params) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(procedure, **params)
        return rows[0] if rows else None

    def fetch_scalar(self, procedure: str, **params) -> Any:
        statement, bound = build_call(procedure, params)
        with self.provider.acquire() as conn:
            try:
                value = conn.execute(statement, bound).scalar()
                conn.commit()
                return value
            except SQLAlchemyError as e:
                conn.rollback()
                raise OperationError(procedure, str(e)) from e

    def execute(self, procedure: str, **params) -> None:
        statement, bound = build_call(procedure, params)
        with self.provider.acquire() as conn:
            try:
                conn.execute(statement, bound)
                conn.commit()
            except SQLAlchemyError as e:
                conn.rollback()
                raise OperationError(procedure, str(e)) from e
        logger.debug("%s executed", procedure)
