"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
colleges, courses). Repositories return SQLModel objects and perform
commits/refreshes where appropriate. Driver and constraint failures are
rolled back and re-raised as `RepositoryError` so controllers can report
the backend's message without knowing about SQLAlchemy.
"""

from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from . import models


class RepositoryError(Exception):
    """A data-layer failure carrying the backend's error message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @classmethod
    def from_exc(cls, exc: SQLAlchemyError) -> 'RepositoryError':
        orig = getattr(exc, 'orig', None)
        return cls(str(orig) if orig is not None else str(exc))


class _Repository:
    def __init__(self, session: Session):
        self.session = session

    def _commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError.from_exc(exc) from exc


class UserRepository(_Repository):
    """CRUD operations for `User` objects."""

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def get_by_username(self, username: str) -> Optional[models.User]:
        """Return a `User` by username or `None` if not found."""
        stmt = select(models.User).where(models.User.username == username)
        return self.session.exec(stmt).first()

    def get(self, user_id: int) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def set_college(self, user_id: int, college_id: Optional[int]) -> int:
        """Point the user's college reference at `college_id` (or clear it).

        Issues a single UPDATE matched on the user id and returns the
        number of rows the backend reported as matched.
        """
        stmt = update(models.User).where(models.User.id == user_id).values(college_id=college_id)
        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError.from_exc(exc) from exc
        return result.rowcount

    def clear_college(self, user_id: int) -> int:
        """Set the user's college reference to NULL; a no-op when already empty."""
        return self.set_college(user_id, None)


class CollegeRepository(_Repository):
    """CRUD operations for `College` objects."""

    def create(self, college: models.College) -> models.College:
        self.session.add(college)
        self._commit()
        self.session.refresh(college)
        return college

    def get(self, college_id: int) -> Optional[models.College]:
        return self.session.get(models.College, college_id)

    def get_by_name(self, name: str) -> Optional[models.College]:
        stmt = select(models.College).where(models.College.name == name)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.College]:
        """Return all colleges ordered by name."""
        stmt = select(models.College).order_by(models.College.name)
        return self.session.exec(stmt).all()


class CourseRepository(_Repository):
    """Query helpers for `Course` records."""

    def create(self, course: models.Course) -> models.Course:
        """Persist a new course and return the managed instance."""
        self.session.add(course)
        self._commit()
        self.session.refresh(course)
        return course

    def get(self, course_id: int) -> Optional[models.Course]:
        """Fetch a course by id."""
        return self.session.get(models.Course, course_id)

    def list_for_college(self, college_id: int) -> List[models.Course]:
        """Return every course of `college_id`, newest first.

        Ties on `created_at` fall back to descending id so the order is
        deterministic.
        """
        stmt = (
            select(models.Course)
            .where(models.Course.college_id == college_id)
            .order_by(models.Course.created_at.desc(), models.Course.id.desc())
        )
        try:
            return self.session.exec(stmt).all()
        except SQLAlchemyError as exc:
            raise RepositoryError.from_exc(exc) from exc
