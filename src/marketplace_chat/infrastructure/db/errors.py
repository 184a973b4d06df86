"""Translate driver / SQLAlchemy failures into application errors."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace_chat.application.exceptions import ConflictError, PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(action: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as exc:
        raise ConflictError(f"{action}: record already exists") from exc
    except TimeoutError as exc:
        logger.warning("%s timed out", action)
        raise PersistenceError(f"{action}: storage timed out", transient=True) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error("%s failed: %s", action, exc)
        raise PersistenceError(f"{action}: storage unavailable") from exc
