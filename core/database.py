"""
Database configuration and management (SQLAlchemy).

Handles engine creation, session factories and first-run initialisation,
including seeding the equipment catalog from its JSON file.
"""

import json
import logging
from pathlib import Path
from typing import Callable

from sqlalchemy import create_engine, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.db_models import Base, EquipmentRecord

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]

def build_engine(database_url: str) -> Engine:
    """Create an engine, preparing the data directory for file-backed SQLite."""
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # A single shared connection keeps the in-memory database alive
        # across sessions and threads
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )

    if database_url.startswith("sqlite:///"):
        db_path = Path(database_url[len("sqlite:///"):])
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(database_url)

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def init_database(engine: Engine, session_factory: SessionFactory, catalog_file: str | Path) -> None:
    """Create all tables and seed the equipment catalog on first run."""
    logger.info("Initializing database...")
    Base.metadata.create_all(bind=engine)

    with session_factory() as session:
        existing = session.scalar(select(func.count()).select_from(EquipmentRecord))
        if existing:
            logger.info(f"Equipment catalog already holds {existing} items")
            return

        items = load_equipment_catalog(catalog_file)
        session.add_all([
            EquipmentRecord(
                equipment_id=item["id"],
                name=item["name"],
                description=item["description"],
                type=item["type"],
                image_url=item.get("image_url"),
                specifications=item.get("specifications", {}),
                target_species=item.get("target_species"),
                water_clarity_conditions=item.get("water_clarity_conditions"),
                light_conditions=item.get("light_conditions"),
                weather_conditions=item.get("weather_conditions"),
                tide_conditions=item.get("tide_conditions"),
                position=position
            )
            for position, item in enumerate(items)
        ])
        session.commit()
        logger.info(f"Seeded equipment catalog with {len(items)} items")

def load_equipment_catalog(catalog_file: str | Path) -> list:
    """Read the raw equipment catalog entries from JSON."""
    try:
        with open(catalog_file) as f:
            return json.load(f)
    except Exception as e:
        logger.error(f"Error reading equipment catalog from {catalog_file}: {str(e)}")
        raise
