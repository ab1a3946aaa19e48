"""
Unit of work with optimistic-lock retry

Stock-mutating requests read products, change them in the session and
commit once. Product rows carry a version counter, so a flush that would
overwrite a concurrent change raises StaleDataError instead of silently
losing it. The whole unit is then rolled back and re-run against fresh rows.
"""
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.settings import settings
from app.exceptions import ConcurrencyError
from app.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def run_unit_of_work(
    db: Session,
    work: Callable[[Session], T],
    *,
    attempts: Optional[int] = None,
    backoff_base: float = 0.05,
    description: str = "unit of work",
) -> T:
    """
    Run `work(db)` and commit, retrying on optimistic-lock conflicts.

    `work` must be safe to re-run from scratch: it receives the same session
    after a rollback, so every row it reads is reloaded.

    Raises:
        ConcurrencyError: if every attempt hit a conflicting update
    """
    attempts = attempts or settings.STOCK_WRITE_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except StaleDataError as exc:
            db.rollback()
            logger.warning(
                f"Concurrent update during {description}, attempt {attempt}/{attempts}",
                extra={"attempt": attempt, "error": str(exc)},
            )
            if attempt < attempts:
                time.sleep(backoff_base * (2 ** (attempt - 1)))
        except Exception:
            db.rollback()
            raise

    raise ConcurrencyError(
        f"{description} could not be applied after {attempts} attempts",
        details={"attempts": attempts},
    )
