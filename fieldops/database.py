"""
Database module for the field operations service.
Provides async SQLite connections and schema initialization.
"""
import aiosqlite
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fieldops.config import settings

logger = logging.getLogger('database')


@asynccontextmanager
async def get_db(path: Optional[str] = None) -> AsyncGenerator[aiosqlite.Connection, None]:
    """
    Async context manager for database connections.

    Usage:
        async with get_db() as db:
            async with db.execute("SELECT * FROM workers") as cursor:
                rows = await cursor.fetchall()
    """
    db = await aiosqlite.connect(path or settings.DATABASE_PATH)
    db.row_factory = aiosqlite.Row
    await db.execute('PRAGMA foreign_keys = ON')
    try:
        yield db
    finally:
        await db.close()


async def init_database(path: Optional[str] = None):
    """Initialize all database tables."""
    async with get_db(path) as db:
        # Regions table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS regions (
                id TEXT PRIMARY KEY,
                name TEXT UNIQUE NOT NULL,
                created_at TEXT NOT NULL
            )
        ''')

        # Users table (owned by the auth layer, read here for scoping)
        await db.execute('''
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                role TEXT NOT NULL DEFAULT 'engineer' CHECK (role IN ('admin', 'engineer')),
                region_id TEXT,
                assigned_regions TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (region_id) REFERENCES regions (id) ON DELETE RESTRICT
            )
        ''')

        # Workers table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS workers (
                id TEXT PRIMARY KEY,
                full_name TEXT NOT NULL,
                personal_id TEXT NOT NULL,
                daily_salary REAL NOT NULL DEFAULT 0,
                region_id TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (region_id) REFERENCES regions (id) ON DELETE RESTRICT
            )
        ''')

        # Equipment table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS equipment (
                id TEXT PRIMARY KEY,
                type TEXT NOT NULL,
                license_plate TEXT NOT NULL,
                operator_name TEXT,
                operator_id TEXT,
                daily_salary REAL NOT NULL DEFAULT 0,
                fuel_type TEXT NOT NULL DEFAULT 'diesel' CHECK (fuel_type IN ('diesel', 'gasoline')),
                region_id TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (region_id) REFERENCES regions (id) ON DELETE RESTRICT
            )
        ''')

        # Daily work reports table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS reports (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                region_id TEXT,
                engineer_id TEXT,
                description TEXT,
                materials_used TEXT,
                materials_received TEXT,
                total_fuel REAL NOT NULL DEFAULT 0,
                total_worker_salary REAL NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                FOREIGN KEY (region_id) REFERENCES regions (id) ON DELETE RESTRICT
            )
        ''')

        # Report workers (many-to-many relationship)
        await db.execute('''
            CREATE TABLE IF NOT EXISTS report_workers (
                id TEXT PRIMARY KEY,
                report_id TEXT NOT NULL,
                worker_id TEXT NOT NULL,
                hours_worked REAL,
                created_at TEXT NOT NULL,
                UNIQUE(report_id, worker_id),
                FOREIGN KEY (report_id) REFERENCES reports (id) ON DELETE CASCADE,
                FOREIGN KEY (worker_id) REFERENCES workers (id) ON DELETE RESTRICT
            )
        ''')

        # Report equipment (many-to-many relationship with fuel usage)
        await db.execute('''
            CREATE TABLE IF NOT EXISTS report_equipment (
                id TEXT PRIMARY KEY,
                report_id TEXT NOT NULL,
                equipment_id TEXT NOT NULL,
                fuel_amount REAL NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                UNIQUE(report_id, equipment_id),
                FOREIGN KEY (report_id) REFERENCES reports (id) ON DELETE CASCADE,
                FOREIGN KEY (equipment_id) REFERENCES equipment (id) ON DELETE RESTRICT
            )
        ''')

        # Incidents table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS incidents (
                id TEXT PRIMARY KEY,
                date TEXT NOT NULL,
                region_id TEXT,
                engineer_id TEXT,
                type TEXT NOT NULL DEFAULT 'Other'
                    CHECK (type IN ('Cut', 'Parallel', 'Damage', 'Node', 'Hydrant', 'Chamber', 'Other')),
                description TEXT,
                latitude REAL,
                longitude REAL,
                image_url TEXT,
                created_at TEXT NOT NULL,
                FOREIGN KEY (region_id) REFERENCES regions (id) ON DELETE RESTRICT
            )
        ''')

        await db.execute('CREATE INDEX IF NOT EXISTS idx_reports_date ON reports (date)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_incidents_date ON incidents (date)')

        await db.commit()
        logger.info("Database initialized successfully")
