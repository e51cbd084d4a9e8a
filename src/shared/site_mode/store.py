"""
Site mode storage.

The site mode decides which content the public front-end shows. It is readable
by anyone and written only through an authenticated admin session. Callers use
the ``SiteModeStore`` interface; the flag lives either in a JSON file (default)
or in a single-row SQL table.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from src.shared.settings import get_settings
from src.shared.site_mode.database import Base, SiteModeRow, SITE_MODE_ROW_ID

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class SiteMode(str, Enum):
    GROUP_ONLY = "group_only"
    FULL_ACCESS = "full_access"


DEFAULT_MODE = SiteMode.GROUP_ONLY


class SiteModeRecord(BaseModel):
    """The persisted record: ``{mode, updated_at, updated_by}``."""
    mode: SiteMode = DEFAULT_MODE
    updated_at: Optional[str] = None
    updated_by: Optional[str] = None


class StorageWriteError(Exception):
    """The new mode could not be persisted."""


def parse_mode(value) -> Optional[SiteMode]:
    """Return the SiteMode for a raw value, or None if it is not a valid mode."""
    try:
        return SiteMode(value)
    except ValueError:
        return None


def _timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime(TIMESTAMP_FORMAT)


class SiteModeStore:
    """Interface for reading and writing the site mode."""

    def read(self) -> SiteModeRecord:
        raise NotImplementedError

    def set(self, mode: SiteMode, actor: str = "admin") -> SiteModeRecord:
        raise NotImplementedError

    def get(self) -> SiteMode:
        return self.read().mode


class FileSiteModeStore(SiteModeStore):
    """Site mode kept in a pretty-printed JSON file."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> SiteModeRecord:
        if not os.path.exists(self.path):
            return SiteModeRecord()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logging.warning(f"Unreadable site mode file {self.path}: {str(e)}")
            return SiteModeRecord()

        if not isinstance(data, dict):
            return SiteModeRecord()
        mode = parse_mode(data.get("mode"))
        if mode is None:
            return SiteModeRecord()
        return SiteModeRecord(
            mode=mode,
            updated_at=data.get("updated_at") if isinstance(data.get("updated_at"), str) else None,
            updated_by=data.get("updated_by") if isinstance(data.get("updated_by"), str) else None,
        )

    def set(self, mode: SiteMode, actor: str = "admin") -> SiteModeRecord:
        record = SiteModeRecord(mode=mode, updated_at=_timestamp(), updated_by=actor)
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, mode=0o755, exist_ok=True)
            # Write next to the target and swap it in, so readers never see half a file
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".site-mode-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(record.model_dump(mode="json"), f, indent=4)
                os.chmod(tmp_path, 0o644)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            logging.error(f"Failed to write site mode file {self.path}: {str(e)}")
            raise StorageWriteError(str(e)) from e
        return record


class SqlSiteModeStore(SiteModeStore):
    """Site mode kept in a single-row SQL table."""

    def __init__(self, database_url: str):
        # Heroku uses postgres:// but SQLAlchemy 2.0+ requires postgresql://
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        self.engine = create_engine(database_url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def init_db(self) -> None:
        Base.metadata.create_all(bind=self.engine, checkfirst=True)

    def read(self) -> SiteModeRecord:
        db = self.SessionLocal()
        try:
            row = db.get(SiteModeRow, SITE_MODE_ROW_ID)
        except SQLAlchemyError as e:
            logging.warning(f"Failed to read site mode row: {str(e)}")
            return SiteModeRecord()
        finally:
            db.close()

        if row is None:
            return SiteModeRecord()
        mode = parse_mode(row.mode)
        if mode is None:
            return SiteModeRecord()
        return SiteModeRecord(
            mode=mode,
            updated_at=_timestamp(row.updated_at.replace(tzinfo=timezone.utc)) if row.updated_at else None,
            updated_by=row.updated_by,
        )

    def set(self, mode: SiteMode, actor: str = "admin") -> SiteModeRecord:
        now = datetime.now(timezone.utc)
        db = self.SessionLocal()
        try:
            row = db.get(SiteModeRow, SITE_MODE_ROW_ID)
            if row is None:
                row = SiteModeRow(id=SITE_MODE_ROW_ID)
                db.add(row)
            row.mode = mode.value
            # Stored naive, in UTC
            row.updated_at = now.replace(tzinfo=None)
            row.updated_by = actor
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logging.error(f"Failed to write site mode row: {str(e)}")
            raise StorageWriteError(str(e)) from e
        finally:
            db.close()
        return SiteModeRecord(mode=mode, updated_at=_timestamp(now), updated_by=actor)


def create_site_mode_store(database_url: Optional[str], file_path: str) -> SiteModeStore:
    """Build the configured store: SQL when a database URL is given, else the JSON file."""
    if database_url:
        store = SqlSiteModeStore(database_url)
        store.init_db()
        logging.info("Site mode stored in database")
        return store
    logging.info(f"Site mode stored in file {file_path}")
    return FileSiteModeStore(file_path)


@lru_cache()
def get_site_mode_store() -> SiteModeStore:
    """Dependency returning the process-wide site mode store."""
    settings = get_settings()
    return create_site_mode_store(settings.SITE_MODE_DATABASE_URL, settings.SITE_MODE_FILE)
