import os
import datetime
from typing import Any, ClassVar, Dict, List, Optional

from dotenv import load_dotenv
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from courses_api.api.errors import ConflictError, NotFoundError, ValidationError
from courses_api.db.models import User, Course, ModelValidationError

load_dotenv()

# === Security config from env ===
BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", 12))

# Password hashing setup
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

DUPLICATE_EMAIL_MESSAGE = "This email is already in use"
COURSE_NOT_FOUND = "There is no course associated with this id"
COURSE_NOT_FOUND_FOR_UPDATE = "No courses found to Update"
COURSE_NOT_FOUND_FOR_DELETE = "No courses found to Delete"

# ==== Pydantic Schemas ====

# PUBLIC_INTERFACE
class UserCreate(BaseModel):
    """
    Schema for user creation (signup) input.

    Every field must be present; null is accepted here and rejected by the
    User model's column checks.
    """
    firstName: Any
    lastName: Any
    emailAddress: Any
    password: Any

    missing_messages: ClassVar[Dict[str, str]] = {
        "firstName": 'Please provide a value for "firstName"',
        "lastName": 'Please provide a value for "lastName"',
        "emailAddress": 'Please provide a value for "email"',
        "password": 'Please provide a value for "password"',
    }

# PUBLIC_INTERFACE
class CourseBase(BaseModel):
    """Base schema for course input; keys outside these fields are ignored."""
    title: Any
    description: Any
    userId: Any

    missing_messages: ClassVar[Dict[str, str]] = {
        "title": 'Please provide a value for "title"',
        "description": 'Please provide a value for "description"',
        "userId": 'Please provide a value for "userID"',
    }

# PUBLIC_INTERFACE
class CourseCreate(CourseBase):
    """Input schema for creating a course."""

# PUBLIC_INTERFACE
class CourseUpdate(CourseBase):
    """Input schema for updating a course."""

# PUBLIC_INTERFACE
class CurrentUserRead(BaseModel):
    """Summary of the authenticated user returned by GET /users."""
    Id: int
    Name: str
    Email: str

# PUBLIC_INTERFACE
class OwnerRead(BaseModel):
    """Public fields of the user owning a course (never the password)."""
    id: int
    firstName: str
    lastName: str
    emailAddress: str

    model_config = ConfigDict(from_attributes=True)

# PUBLIC_INTERFACE
class CourseRead(BaseModel):
    """Returned data for a course, with its owner included."""
    id: int
    title: str
    description: str
    userId: int
    createdAt: datetime.datetime
    updatedAt: datetime.datetime
    owner: Optional[OwnerRead] = None

    model_config = ConfigDict(from_attributes=True)

# ==== Utility functions ====

# PUBLIC_INTERFACE
def get_password_hash(password: str) -> str:
    """Hash the plain password."""
    return pwd_context.hash(password)

# PUBLIC_INTERFACE
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against stored hash."""
    return pwd_context.verify(plain_password, hashed_password)

# PUBLIC_INTERFACE
def dummy_verify() -> None:
    """Spend the same time as a real verify, for lookups that found no user."""
    pwd_context.dummy_verify()

# PUBLIC_INTERFACE
def current_user_summary(user: User) -> CurrentUserRead:
    """Shape the authenticated user as {Id, Name, Email}."""
    return CurrentUserRead(Id=user.id, Name=user.display_name, Email=user.emailAddress)

def _parse_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

# === CRUD for Users and Courses (used by API routes) ===

# PUBLIC_INTERFACE
def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email address."""
    return db.query(User).filter(User.emailAddress == email).first()

# PUBLIC_INTERFACE
def create_user(db: Session, user: UserCreate) -> User:
    """
    Create a new user, hashing the password before the row is built.

    Raises ConflictError if the email is taken and ValidationError if a
    column value is rejected. The unique index on emailAddress has the last
    word when two signups race past the lookup.
    """
    email = user.emailAddress
    if isinstance(email, str) and get_user_by_email(db, email):
        raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

    password = user.password
    try:
        if not isinstance(password, str) or not password:
            raise ModelValidationError("password", "A password is required")
        db_user = User(
            firstName=user.firstName,
            lastName=user.lastName,
            emailAddress=email,
            password=get_password_hash(password),
        )
    except ModelValidationError as error:
        raise ValidationError([error.message])

    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if get_user_by_email(db, email):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        raise
    db.refresh(db_user)
    return db_user

# PUBLIC_INTERFACE
def get_courses(db: Session) -> List[Course]:
    """List every course with its owner, oldest first."""
    return db.query(Course).options(joinedload(Course.owner)).order_by(Course.id).all()

# PUBLIC_INTERFACE
def get_course(db: Session, course_id: Any, missing_message: str = COURSE_NOT_FOUND) -> Course:
    """Get a single course by ID, raises NotFoundError with missing_message if absent."""
    pk = _parse_id(course_id)
    course = None
    if pk is not None:
        course = db.query(Course).options(joinedload(Course.owner)).filter(Course.id == pk).first()
    if not course:
        raise NotFoundError(missing_message)
    return course

# PUBLIC_INTERFACE
def create_course(db: Session, course: CourseCreate) -> Course:
    """Create a course from the submitted fields."""
    try:
        db_course = Course(**course.model_dump())
    except ModelValidationError as error:
        raise ValidationError([error.message])
    db.add(db_course)
    db.commit()
    db.refresh(db_course)
    return db_course

# PUBLIC_INTERFACE
def update_course(db: Session, course_id: Any, course_update: CourseUpdate) -> Course:
    """Apply the submitted title, description and userId to an existing course."""
    course = get_course(db, course_id, COURSE_NOT_FOUND_FOR_UPDATE)
    try:
        for field, value in course_update.model_dump().items():
            setattr(course, field, value)
    except ModelValidationError as error:
        db.rollback()
        raise ValidationError([error.message])
    db.commit()
    db.refresh(course)
    return course

# PUBLIC_INTERFACE
def delete_course(db: Session, course_id: Any) -> None:
    """Remove a course. Raises NotFoundError if it does not exist."""
    course = get_course(db, course_id, COURSE_NOT_FOUND_FOR_DELETE)
    db.delete(course)
    db.commit()
