from __future__ import annotations

from pathlib import Path
from typing import Generator, Optional, Union
from contextlib import contextmanager

from sqlmodel import SQLModel, Session, create_engine

from billing.core.paths import database_path

_ENGINE = None


def get_engine(echo: bool = False):
	"""Return a singleton SQLAlchemy engine for the project SQLite DB."""
	global _ENGINE
	if _ENGINE is None:
		configure(database_path(), echo=echo)
	return _ENGINE


def configure(db_path: Union[str, Path], echo: bool = False):
	"""Point the engine at a different SQLite file (tests, tools). Returns the new engine."""
	global _ENGINE
	p = Path(db_path)
	p.parent.mkdir(parents=True, exist_ok=True)
	# Use posix path for SQLAlchemy URL compatibility on Windows
	url = f"sqlite:///{p.as_posix()}"
	if _ENGINE is not None:
		_ENGINE.dispose()
	_ENGINE = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
	return _ENGINE


def create_db_and_tables(echo: bool = False) -> None:
	"""Create the SQLite database file and all SQLModel tables."""
	# Ensure models are imported so metadata has all tables
	import billing.data.models  # noqa: F401

	SQLModel.metadata.create_all(get_engine(echo=echo))


def get_session(echo: bool = False) -> Session:
	"""Create a new SQLModel Session bound to the project engine.

	expire_on_commit=False so returned instances keep attribute values after commit.
	"""
	return Session(get_engine(echo=echo), expire_on_commit=False)


@contextmanager
def session_scope(echo: bool = False) -> Generator[Session, None, None]:
	"""Transactional scope: commit on success, roll back and re-raise on error.

	Usage:
		with session_scope() as s:
			... use s ...
	"""
	session = get_session(echo=echo)
	try:
		yield session
		session.commit()
	except Exception:
		session.rollback()
		raise
	finally:
		session.close()
