"""Result envelope for store-facing operations."""
import functools
import logging
from dataclasses import dataclass
from typing import Any, Optional

from flask import current_app
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

from bakery.extensions import db
from bakery.services.errors import StoreError, TransientStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    data: Any = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def store_action(func):
    """Run ``func`` as one unit of work and wrap the outcome in ActionResult.

    Any failure rolls the session back, so a partially applied mutation is
    never committed. Connectivity errors and timeouts are retried
    ``STORE_RETRIES`` times before surfacing as TransientStoreError.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        retries = current_app.config.get("STORE_RETRIES", 1)
        for attempt in range(retries + 1):
            try:
                return ActionResult(data=func(*args, **kwargs))
            except StoreError as e:
                db.session.rollback()
                logger.info("%s rejected: %s", func.__name__, e.message)
                return ActionResult(error=e)
            except (OperationalError, InterfaceError) as e:
                db.session.rollback()
                logger.warning(
                    "%s hit a transient store failure (attempt %d/%d): %s",
                    func.__name__,
                    attempt + 1,
                    retries + 1,
                    e.__class__.__name__,
                )
            except SQLAlchemyError:
                db.session.rollback()
                logger.exception("%s failed", func.__name__)
                return ActionResult(error=StoreError())

        logger.error("%s gave up after %d attempts", func.__name__, retries + 1)
        return ActionResult(error=TransientStoreError())

    return wrapper
