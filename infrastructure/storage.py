"""Translation of backing-store faults into the domain error taxonomy"""
import logging
from contextlib import contextmanager
from typing import Iterator

from domain.errors import ReservationError, StorageFailure

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Let domain errors through; wrap everything else as StorageFailure"""
    try:
        yield
    except ReservationError:
        raise
    except Exception as exc:
        logger.exception("Store call failed during %s", operation)
        raise StorageFailure(exc) from exc
