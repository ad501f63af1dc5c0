"""
Staff user model.
Handles profile data, role and department assignment, skills and the write-only password.
"""

from sqlalchemy import String, Text, Boolean, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from realty_api.database import Base, utcnow
from passlib.context import CryptContext
from datetime import datetime
import enum
from typing import List, Optional

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    """Staff roles."""
    ADMIN = "Admin"
    MANAGER = "Manager"
    AGENT = "Agent"
    ASSISTANT = "Assistant"
    DEVELOPER = "Developer"
    MARKETING = "Marketing"
    SALES = "Sales"


class Department(str, enum.Enum):
    """Departments a staff member can belong to."""
    SALES = "Sales"
    MARKETING = "Marketing"
    OPERATIONS = "Operations"
    IT = "IT"
    HR = "HR"
    FINANCE = "Finance"
    MANAGEMENT = "Management"


class User(Base):
    """
    Staff member record.
    Only active users show up in listings and searches; removal is a hard delete.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Stored lowercased, unique across active and inactive users
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole),
        nullable=False,
        default=UserRole.AGENT,
        index=True,
    )

    department: Mapped[Department] = mapped_column(
        SQLEnum(Department),
        nullable=False,
        default=Department.SALES,
        index=True,
    )

    skills: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )

    date_joined: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    hashed_password: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        comment="Bcrypt hashed password, never serialized"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @classmethod
    def hash_password(cls, password: str) -> str:
        """Hash a password using bcrypt."""
        return pwd_context.hash(password)
