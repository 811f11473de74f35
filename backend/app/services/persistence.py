"""Transaction boundary shared by every write path.

A unit of work is any callable taking the session. It runs inside the
session's transaction; the executor commits on success and rolls back on
any exception. An optional validation query runs after commit and must
find the row that was just written.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.exceptions import PersistenceValidationFailed, ReferentialIntegrityError

logger = logging.getLogger(__name__)

T = TypeVar("T")

UnitOfWork = Callable[[Session], T]


@dataclass
class IntegrityCheck:
    """Pre-flight check that `model` has a row whose primary key is `value`."""
    model: Any
    value: Any
    label: Optional[str] = None

    @property
    def name(self) -> str:
        return self.label or self.model.__name__


class PersistenceExecutor:
    """Runs units of work atomically against an injected session."""

    def __init__(self, db: Session):
        self.db = db

    def run(self, unit_of_work: UnitOfWork, validation: Optional[Select] = None) -> T:
        """Execute one unit of work in a transaction.

        Raises whatever the unit of work raised, after rolling back.
        Raises PersistenceValidationFailed when `validation` finds no row
        after commit.
        """
        try:
            result = unit_of_work(self.db)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        if validation is not None:
            self._validate(validation)

        return result

    def run_many(
        self,
        units_of_work: Sequence[UnitOfWork],
        validations: Iterable[Select] = (),
    ) -> List[Any]:
        """Execute several units of work in one transaction, all or nothing."""
        results = []
        try:
            for unit in units_of_work:
                results.append(unit(self.db))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for validation in validations:
            self._validate(validation)

        return results

    def check_referential_integrity(self, checks: Iterable[IntegrityCheck]) -> None:
        """Verify referenced rows exist before writing.

        Raises ReferentialIntegrityError naming the first missing reference,
        instead of letting the store raise a foreign key violation.
        """
        for check in checks:
            if check.value is None or not self.exists(check.model, id=check.value):
                raise ReferentialIntegrityError(f"{check.name} not found")

    def exists(self, model, **filters) -> bool:
        """Return True if any row of `model` matches the equality filters."""
        stmt = select(model.id).filter_by(**filters).limit(1)
        return self.db.execute(stmt).first() is not None

    def _validate(self, validation: Select) -> None:
        if self.db.execute(validation.limit(1)).first() is None:
            logger.error(f"Persistence validation failed: {validation}")
            raise PersistenceValidationFailed()
