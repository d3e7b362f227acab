from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON
from sqlalchemy.orm import validates
from app.core.database import Base
from app.models.base import IDMixin, TimestampMixin


class User(IDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)

    # Profile
    image_url = Column(Text, nullable=True)
    additional_info = Column(JSON, nullable=False, default=dict)

    # Account status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    last_login_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<User {self.username}>"

    @validates("email")
    def normalize_email(self, key, value):
        return casefold_email(value)


def casefold_email(value: str) -> str:
    return (value or "").strip().lower()
