# app/db/session.py

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Optional
from urllib.parse import quote_plus

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import ArgumentError, DBAPIError, SQLAlchemyError

from app.core.config import Settings, settings
from app.core.exceptions import ConnectionFailureCategory, DatabaseConnectionError
from app.schemas.error_info import ErrorInfo

logger = logging.getLogger(__name__)


AUTHENTICATION_HINT = (
    "Login failed. Check DB_USER / DB_PASSWORD, and if the server uses a managed "
    "identity make sure that identity has been created as a database role and "
    "granted read/write access plus EXECUTE on the expense procedures."
)
NETWORK_HINT = (
    "Cannot connect to the database server. Verify the host name and port are "
    "correct and that this machine's IP address is allowed through the firewall."
)
IDENTITY_HINT = (
    "Managed identity authentication failed. Ensure the identity client id is "
    "configured for this deployment and the identity has access to the database."
)
CONFIGURATION_HINT = (
    "No database connection configured. Set DATABASE_URL, or DB_HOST, DB_NAME, "
    "DB_USER and DB_PASSWORD."
)
INVALID_URL_HINT = (
    "The database URL could not be used. Check the scheme is postgresql:// "
    "(not postgres://) and that the psycopg2 driver is installed."
)

AUTHENTICATION_MARKERS = ("login failed", "password authentication failed", "authentication failed")
NETWORK_MARKERS = (
    "cannot open server",
    "could not connect",
    "connection refused",
    "timeout expired",
    "could not translate host name",
    "network is unreachable",
)
IDENTITY_MARKERS = ("managed identity",)


def build_database_url(cfg: Settings) -> Optional[str]:
    if cfg.DATABASE_URL:
        return cfg.DATABASE_URL
    if not cfg.database_configured:
        return None

    # ✅ URL-encode password to handle special characters like @ $ !
    encoded_password = quote_plus(cfg.DB_PASSWORD)

    return (
        f"postgresql+psycopg2://{cfg.DB_USER}:"
        f"{encoded_password}@"
        f"{cfg.DB_HOST}:"
        f"{cfg.DB_PORT}/"
        f"{cfg.DB_NAME}"
        f"?sslmode={cfg.DB_SSLMODE}"
    )


def classify_connection_error(exc: BaseException) -> ConnectionFailureCategory:
    """Best-effort category for a failed connection attempt.

    SQLSTATE codes from the driver win; message substrings are only
    consulted when the driver gave no code.
    """
    orig = getattr(exc, "orig", None) if isinstance(exc, DBAPIError) else exc
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        if code.startswith("28"):
            return ConnectionFailureCategory.authentication
        if code.startswith("08"):
            return ConnectionFailureCategory.network

    text = str(exc).lower()
    if any(marker in text for marker in IDENTITY_MARKERS):
        return ConnectionFailureCategory.identity_configuration
    if any(marker in text for marker in AUTHENTICATION_MARKERS):
        return ConnectionFailureCategory.authentication
    if any(marker in text for marker in NETWORK_MARKERS):
        return ConnectionFailureCategory.network
    return ConnectionFailureCategory.unknown


HINTS = {
    ConnectionFailureCategory.authentication: AUTHENTICATION_HINT,
    ConnectionFailureCategory.network: NETWORK_HINT,
    ConnectionFailureCategory.identity_configuration: IDENTITY_HINT,
    ConnectionFailureCategory.configuration: CONFIGURATION_HINT,
}


class ConnectionProvider:
    """Opens one database connection per operation.

    ``is_connected`` and ``last_error`` describe the most recent attempt
    made by any caller; treat them as diagnostics only.
    """

    def __init__(self, cfg: Settings = settings, engine: Optional[Engine] = None):
        self._settings = cfg
        self._engine = engine
        self.is_connected = False
        self.last_error: Optional[ErrorInfo] = None

    @property
    def engine(self) -> Optional[Engine]:
        if self._engine is None:
            url = build_database_url(self._settings)
            if url is None:
                return None
            connect_args = {}
            if url.startswith("postgresql"):
                connect_args["connect_timeout"] = self._settings.DB_CONNECT_TIMEOUT
            self._engine = create_engine(
                url,
                pool_pre_ping=True,
                connect_args=connect_args,
            )
        return self._engine

    def _fail(
        self,
        message: str,
        category: ConnectionFailureCategory,
        cause: Optional[BaseException],
        hint: Optional[str] = None,
    ):
        hint = hint or HINTS.get(category) or (str(cause) if cause else message)
        error = DatabaseConnectionError(message, category=category, hint=hint)
        self.is_connected = False
        self.last_error = ErrorInfo.create(message, hint, category=category)
        logger.error("%s (%s)", message, category.value, exc_info=cause)
        return error

    @contextmanager
    def acquire(self) -> Iterator[Connection]:
        try:
            engine = self.engine
        except (ArgumentError, ImportError) as e:
            raise self._fail(
                "Invalid database configuration",
                ConnectionFailureCategory.configuration,
                e,
                hint=INVALID_URL_HINT,
            ) from e
        if engine is None:
            raise self._fail(
                "Database connection is not configured",
                ConnectionFailureCategory.configuration,
                None,
            )

        try:
            connection = engine.connect()
        except SQLAlchemyError as e:
            raise self._fail("Database connection failed", classify_connection_error(e), e) from e
        except Exception as e:
            raise self._fail(
                "Unexpected error connecting to database",
                classify_connection_error(e),
                e,
            ) from e

        self.is_connected = True
        self.last_error = None
        try:
            yield connection
        finally:
            connection.close()


@lru_cache(maxsize=1)
def get_connection_provider() -> ConnectionProvider:
    return ConnectionProvider(settings)
