"""MySQL connection configuration, startup ping and session management."""

import logging
from collections.abc import Generator
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import URL, create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import DatabaseSettings, Settings, load_database_settings

logger = logging.getLogger(__name__)

# Cloud SQL mounts instance sockets under this directory on Cloud Run.
CLOUD_SQL_SOCKET_DIR = "/cloudsql"


class DatabaseConnectionError(Exception):
    """Raised when the database cannot be opened or does not answer a ping."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class MySQLConfig:
    """
    MySQL connection details.

    Either unix_socket or host/port is used; when unix_socket is set, host and
    port are ignored.
    """

    database_name: str
    username: str = ""
    password: str = ""
    host: str = ""
    port: int = 0
    unix_socket: str = ""

    def connection_url(self) -> URL:
        """Return a SQLAlchemy URL for the PyMySQL driver."""
        if self.unix_socket:
            return URL.create(
                "mysql+pymysql",
                username=self.username or None,
                password=self.password or None,
                database=self.database_name,
                query={"unix_socket": self.unix_socket},
            )
        return URL.create(
            "mysql+pymysql",
            username=self.username or None,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.database_name,
        )

    def connection_string(self, mask_password: bool = True) -> str:
        """Return a DSN of the form [user[:password]@]unix(path)/db or tcp([host]:port)/db."""
        cred = ""
        if self.username:
            cred = self.username
            if self.password:
                cred += ":" + ("***" if mask_password else self.password)
            cred += "@"
        if self.unix_socket:
            return f"{cred}unix({self.unix_socket})/{self.database_name}"
        return f"{cred}tcp([{self.host}]:{self.port})/{self.database_name}"


def configure_cloud_sql(db_settings: DatabaseSettings, managed: bool) -> MySQLConfig:
    """
    Build the connection config for the current environment.

    On Cloud Run (managed=True) connect through the instance's unix socket;
    locally connect over TCP to DB_HOST:DB_PORT (localhost:3306 by default).
    """
    password = db_settings.DB_PASSWORD.get_secret_value()
    if managed:
        return MySQLConfig(
            database_name=db_settings.DB_NAME,
            username=db_settings.DB_USERNAME,
            password=password,
            unix_socket=f"{CLOUD_SQL_SOCKET_DIR}/{db_settings.INSTANCE_CONNECTION_NAME}",
        )
    return MySQLConfig(
        database_name=db_settings.DB_NAME,
        username=db_settings.DB_USERNAME,
        password=password,
        host=db_settings.DB_HOST,
        port=db_settings.DB_PORT,
    )


def ping(engine: Engine) -> None:
    """Run a trivial query on a fresh connection. Raises SQLAlchemyError on failure."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def open_database(
    config: MySQLConfig,
    pool_size: int = 5,
    max_overflow: int = 10,
    echo: bool = False,
) -> Engine:
    """
    Create a pooled engine and verify it with a ping.

    The engine is disposed before raising if the ping fails, so no pooled
    connections outlive a failed startup.
    """
    logger.info("Opening database: %s", config.connection_string())
    try:
        engine = create_engine(
            config.connection_url(),
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            echo=echo,
        )
    except (SQLAlchemyError, ImportError) as e:
        raise DatabaseConnectionError(f"mysql: could not get a connection: {e}") from e

    try:
        ping(engine)
    except SQLAlchemyError as e:
        engine.dispose()
        raise DatabaseConnectionError(
            f"mysql: could not establish a good connection: {e}"
        ) from e
    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to the given engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session from the app's factory and closes it when done."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False


def connect(settings: Settings) -> Engine:
    """Resolve credentials for the configured profile, choose the connection mode and open it."""
    db_settings = load_database_settings(settings.CONFIG_PROFILE)
    config = configure_cloud_sql(db_settings, managed=settings.managed_environment)
    logger.info(
        "Database mode: %s (profile=%s)",
        "unix socket" if config.unix_socket else "tcp",
        settings.CONFIG_PROFILE,
    )
    return open_database(
        config,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        echo=settings.DEBUG,
    )
