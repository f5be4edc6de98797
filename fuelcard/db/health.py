"""Database health service for connectivity and schema readiness checks."""

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from fuelcard.domain import HealthStatus

from .interfaces import DatabaseHealthPort


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Database health service backed by SQLAlchemy engine connectivity checks."""

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Verify connectivity and that the transaction schema has been migrated.

        Returns:
            HealthStatus: `ok` when reachable and migrated, `schema_missing` when
                the database answers but the tables are absent.

        Raises:
            ConnectionError: Raised when the database cannot be reached.
        """

        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as error:
            raise ConnectionError("database connectivity check failed") from error

        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1 FROM fuel_transaction WHERE 1 = 0"))
                connection.execute(text("SELECT 1 FROM vehicle WHERE 1 = 0"))
        except SQLAlchemyError:
            return HealthStatus(status="schema_missing", detail="run `alembic upgrade head` to create tables")

        return HealthStatus(status="ok", detail="database connectivity verified")
