"""Session token model, laid out like Laravel Sanctum's personal_access_tokens."""
from datetime import datetime
from typing import List, Optional
from sqlalchemy import Column, String, DateTime, BigInteger, Text, Index
from app.core.constants import TOKENABLE_USER
from app.core.database import Base
from app.models.base import IDMixin, TimestampMixin
from app.utils.helpers import utcnow


class PersonalAccessToken(IDMixin, TimestampMixin, Base):
    __tablename__ = "personal_access_tokens"
    __table_args__ = (
        Index("ix_personal_access_tokens_tokenable", "tokenable_type", "tokenable_id"),
    )

    # Polymorphic owner, no FK constraint (orphans are rejected at validation)
    tokenable_type = Column(String(255), nullable=False, default=TOKENABLE_USER)
    tokenable_id = Column(BigInteger, nullable=False)

    name = Column(String(255), nullable=False)
    # SHA-256 hex digest of the opaque credential
    token = Column(String(64), unique=True, nullable=False)
    abilities = Column(Text, nullable=True)

    last_used_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<PersonalAccessToken {self.id} user={self.tokenable_id}>"

    @property
    def ability_list(self) -> List[str]:
        if not self.abilities:
            return []
        return [a for a in self.abilities.split(",") if a]

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at

    def is_live(self, now: Optional[datetime] = None) -> bool:
        return not self.is_expired(now or utcnow())
