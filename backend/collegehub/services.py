"""Business logic services used by HTTP controllers.

This module holds small service classes that coordinate repositories.
Services are intentionally thin: they perform validation, execute
domain logic and persist aggregates via repositories. Validation
failures raise `ValueError`; data-layer failures surface as
`repositories.RepositoryError`.
"""

from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
import jwt
from typing import List, Optional
from . import models, repositories
from .config import settings
from sqlmodel import Session

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class AuthService:
    """Authentication related operations (register + authenticate)."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, username: str, password: str) -> models.User:
        """Create a new user with a hashed password.

        Returns the persisted `User` instance.
        """
        if not username or not username.strip():
            raise ValueError("username must not be empty")
        if not password:
            raise ValueError("password must not be empty")
        hashed = PWD_CTX.hash(password)
        u = models.User(username=username.strip(), password_hash=hashed)
        return self.user_repo.create(u)

    def authenticate(self, username: str, password: str) -> Optional[str]:
        """Verify credentials and return a signed JWT token on success.

        Returns `None` if authentication fails.
        """
        user = self.user_repo.get_by_username(username)
        if not user:
            return None
        if not PWD_CTX.verify(password, user.password_hash):
            return None
        return issue_token(user)


def issue_token(user: models.User) -> str:
    """Sign a session token carrying the user's id and username."""
    expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
    payload = {"user_id": user.id, "username": user.username, "exp": int(expire.timestamp())}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


class MembershipService:
    """Join and leave colleges."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)
        self.college_repo = repositories.CollegeRepository(session)

    def create_college(self, name: str) -> models.College:
        """Create a college; names are unique."""
        name = name.strip()
        if not name:
            raise ValueError("college name must not be empty")
        if self.college_repo.get_by_name(name):
            raise ValueError(f"college already exists: {name}")
        return self.college_repo.create(models.College(name=name))

    def join(self, user_id: int, college_id: int) -> bool:
        """Assign the user to `college_id`.

        Returns False when the college does not exist.
        """
        if not self.college_repo.get(college_id):
            return False
        self.user_repo.set_college(user_id, college_id)
        return True

    def leave(self, user_id: int) -> None:
        """Clear the user's college reference.

        Clearing an already-empty reference is a no-op at the data layer,
        so repeated calls succeed.
        """
        self.user_repo.clear_college(user_id)


class CourseService:
    """Publish and list courses."""
    def __init__(self, session: Session):
        self.session = session
        self.course_repo = repositories.CourseRepository(session)
        self.college_repo = repositories.CollegeRepository(session)

    def create_course(self, user: models.User, college_id: int, title: str, description: str = "") -> models.Course:
        """Create a course in `college_id` on behalf of `user`.

        Raises `PermissionError` unless the user belongs to that college.
        """
        if not self.college_repo.get(college_id):
            raise LookupError(f"college not found: {college_id}")
        if user.college_id != college_id:
            raise PermissionError("only members of a college can publish its courses")
        title = title.strip()
        if not title:
            raise ValueError("title must not be empty")
        course = models.Course(title=title, description=description or "", college_id=college_id, created_by=user.id)
        return self.course_repo.create(course)

    def list_for_college(self, college_id: int) -> List[models.Course]:
        """Return the courses of a college, newest first."""
        return self.course_repo.list_for_college(college_id)
