from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship, declarative_base, validates
import datetime

Base = declarative_base()


# PUBLIC_INTERFACE
class ModelValidationError(ValueError):
    """Raised when a column value is rejected before it reaches the database."""

    def __init__(self, field, message):
        super().__init__(message)
        self.field = field
        self.message = message


def _require_text(field, value, message):
    if not isinstance(value, str) or not value.strip():
        raise ModelValidationError(field, message)
    return value


# PUBLIC_INTERFACE
class User(Base):
    """
    Database model for a user.

    The password column only ever holds a bcrypt hash.
    """
    __tablename__ = "users"

    _required_messages = {
        "firstName": "A first name is required",
        "lastName": "A last name is required",
        "emailAddress": "An email address is required",
        "password": "A password is required",
    }

    id = Column(Integer, primary_key=True, index=True)
    firstName = Column("first_name", String, nullable=False)
    lastName = Column("last_name", String, nullable=False)
    emailAddress = Column("email_address", String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    createdAt = Column("created_at", DateTime, default=datetime.datetime.utcnow, nullable=False)
    updatedAt = Column("updated_at", DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow, nullable=False)

    courses = relationship("Course", back_populates="owner", cascade="all, delete-orphan")

    @validates("firstName", "lastName", "emailAddress", "password")
    def validate_required(self, key, value):
        return _require_text(key, value, self._required_messages[key])

    @property
    def display_name(self):
        return f"{self.firstName} {self.lastName}"


# PUBLIC_INTERFACE
class Course(Base):
    """
    Database model for a course, owned by the user referenced in userId.
    """
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    userId = Column("user_id", Integer, ForeignKey("users.id"), nullable=False)
    createdAt = Column("created_at", DateTime, default=datetime.datetime.utcnow, nullable=False)
    updatedAt = Column("updated_at", DateTime, default=datetime.datetime.utcnow, onupdate=datetime.datetime.utcnow, nullable=False)

    owner = relationship("User", back_populates="courses")

    @validates("title")
    def validate_title(self, key, value):
        return _require_text(key, value, "A title is required")

    @validates("description")
    def validate_description(self, key, value):
        return _require_text(key, value, "A description is required")

    @validates("userId")
    def validate_user_id(self, key, value):
        # JSON clients send ids as numbers or numeric strings
        if isinstance(value, bool):
            raise ModelValidationError(key, "A valid user id is required")
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        if not isinstance(value, int):
            raise ModelValidationError(key, "A valid user id is required")
        return value
