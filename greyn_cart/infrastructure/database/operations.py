"""
Database operations with connection management

Engine and session factory ownership, table creation and catalog seeding.
"""

import logging
import threading
import time
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import Engine, create_engine, event, make_url, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from greyn_cart.infrastructure.configuration.config import Settings, get_config
from greyn_cart.infrastructure.database.models import Base, Project
from greyn_cart.infrastructure.logging.logging_config import PerformanceLogger
from greyn_cart.infrastructure.utilities.constants import (
    DatabaseSettings,
    RetrySettings,
)
from greyn_cart.infrastructure.utilities.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Database manager with slow query monitoring"""

    def __init__(self, config: Optional[Settings] = None):
        """Initialize database manager with configuration"""
        self.config = config or get_config()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_engine(self) -> Engine:
        """Get database engine with proper configuration"""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """Create database engine with environment-specific settings"""
        database_url = self.config.database_url
        engine_kwargs: Dict[str, Any] = {
            "pool_pre_ping": True,
            "echo": False,
        }

        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {
                "check_same_thread": False,
                "timeout": RetrySettings.CONNECTION_TIMEOUT_SECONDS,
            }
            if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
            else:
                database_path = make_url(database_url).database
                if database_path:
                    Path(database_path).parent.mkdir(parents=True, exist_ok=True)
        else:
            if self.config.environment == "production":
                pool_size = DatabaseSettings.PRODUCTION_POOL_SIZE
                max_overflow = DatabaseSettings.PRODUCTION_MAX_OVERFLOW
            else:
                pool_size = DatabaseSettings.DEVELOPMENT_POOL_SIZE
                max_overflow = DatabaseSettings.DEVELOPMENT_MAX_OVERFLOW
            engine_kwargs.update({
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_recycle": DatabaseSettings.POOL_RECYCLE_SECONDS,
            })

        engine = create_engine(database_url, **engine_kwargs)
        self._setup_engine_events(engine)
        return engine

    def _setup_engine_events(self, engine: Engine) -> None:
        """Setup SQLAlchemy events for slow query logging"""

        @event.listens_for(engine, "before_cursor_execute")
        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            context._query_start_time = time.perf_counter()

        @event.listens_for(engine, "after_cursor_execute")
        def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            total_time_ms = (time.perf_counter() - context._query_start_time) * 1000

            if total_time_ms > DatabaseSettings.SLOW_QUERY_THRESHOLD_MS:
                self.logger.warning(
                    "Slow query detected",
                    extra={
                        "query_time_ms": total_time_ms,
                        "statement": statement[:200] + "..." if len(statement) > 200 else statement,
                    },
                )

    def get_session_factory(self) -> sessionmaker:
        """Get session factory"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.get_engine(),
                expire_on_commit=False,
            )
        return self._session_factory

    def get_session(self) -> Session:
        """Get database session"""
        return self.get_session_factory()()

    def create_tables(self) -> None:
        """Create all database tables"""
        try:
            with PerformanceLogger("create_tables", self.logger):
                Base.metadata.create_all(self.get_engine())
                self.logger.info("Database tables created successfully")
        except SQLAlchemyError as e:
            self.logger.error("Failed to create database tables: %s", e, exc_info=True)
            raise DatabaseError(
                f"Failed to create database tables: {e}", operation="create_tables"
            ) from e

    def health_check(self) -> Dict[str, Any]:
        """Check that the database answers a trivial query"""
        start_time = time.perf_counter()
        try:
            with self.get_engine().connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            return {
                "status": "healthy",
                "response_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
            }
        except SQLAlchemyError as e:
            self.logger.error("Database health check failed: %s", e)
            return {"status": "unhealthy", "error": str(e)}

    def close(self) -> None:
        """Dispose the engine"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None


_db_manager: Optional[DatabaseManager] = None
_db_manager_lock = threading.Lock()


def get_db_manager() -> DatabaseManager:
    """Get the process-wide database manager"""
    global _db_manager
    if _db_manager is None:
        with _db_manager_lock:
            if _db_manager is None:
                _db_manager = DatabaseManager()
    return _db_manager


DEFAULT_PROJECTS = [
    {
        "id": "1",
        "name": "Amazon Rainforest Conservation",
        "ngo_name": "Rainforest Alliance",
        "location": "Amazon Basin, Brazil",
        "category": "Forest Conservation",
        "impact_type": "Forest Conservation",
        "carbon_impact": "125,000 tonnes CO2e",
        "price_per_unit": Decimal("15.50"),
        "available_credits": 125000,
        "is_verified": True,
        "featured": True,
    },
    {
        "id": "2",
        "name": "Solar Energy Farm Initiative",
        "ngo_name": "Green Energy Foundation",
        "location": "California, USA",
        "category": "Renewable Energy",
        "impact_type": "Renewable Energy",
        "carbon_impact": "85,000 tonnes CO2e",
        "price_per_unit": Decimal("22.00"),
        "available_credits": 85000,
        "is_verified": True,
    },
    {
        "id": "3",
        "name": "Mangrove Restoration Program",
        "ngo_name": "Ocean Conservation Trust",
        "location": "Sundarbans, Bangladesh",
        "category": "Marine Conservation",
        "impact_type": "Marine Conservation",
        "carbon_impact": "95,000 tonnes CO2e",
        "price_per_unit": Decimal("18.75"),
        "available_credits": 95000,
        "is_verified": True,
    },
    {
        "id": "4",
        "name": "Wind Power Development",
        "ngo_name": "Clean Air Initiative",
        "location": "Scotland, UK",
        "category": "Renewable Energy",
        "impact_type": "Renewable Energy",
        "carbon_impact": "110,000 tonnes CO2e",
        "price_per_unit": Decimal("25.00"),
        "available_credits": 110000,
        "is_verified": True,
    },
    {
        "id": "5",
        "name": "Community Reforestation Project",
        "ngo_name": "Trees for Life",
        "location": "Kenya",
        "category": "Reforestation",
        "impact_type": "Reforestation",
        "carbon_impact": "65,000 tonnes CO2e",
        "price_per_unit": Decimal("12.00"),
        "available_credits": 65000,
        "is_verified": False,
    },
    {
        "id": "6",
        "name": "Waste-to-Energy Conversion",
        "ngo_name": "Sustainable Cities Network",
        "location": "Singapore",
        "category": "Waste Management",
        "impact_type": "Waste Management",
        "carbon_impact": "45,000 tonnes CO2e",
        "price_per_unit": Decimal("30.00"),
        "available_credits": 45000,
        "is_verified": True,
    },
]


def init_default_projects(db_manager: Optional[DatabaseManager] = None) -> int:
    """Insert the default catalog if the projects table is empty"""
    db_manager = db_manager or get_db_manager()
    session = db_manager.get_session()
    try:
        if session.query(Project).count() > 0:
            logger.info("Catalog already populated, skipping seed")
            return 0

        for data in DEFAULT_PROJECTS:
            session.add(Project(currency=db_manager.config.currency, **data))
        session.commit()
        logger.info("Seeded %d default projects", len(DEFAULT_PROJECTS))
        return len(DEFAULT_PROJECTS)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Failed to seed default projects: %s", e, exc_info=True)
        raise DatabaseError(f"Failed to seed projects: {e}", operation="seed") from e
    finally:
        session.close()


def init_db(db_manager: Optional[DatabaseManager] = None) -> None:
    """Create tables and, when configured, seed the catalog"""
    db_manager = db_manager or get_db_manager()
    logger.info("Initializing database...")
    db_manager.create_tables()
    if db_manager.config.seed_default_projects:
        init_default_projects(db_manager)
    logger.info("Database initialization completed")
