# src/models/password_reset.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, ForeignKey, DateTime, String, Boolean, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db.database import Base


class PasswordResetToken(Base):
    __tablename__ = "password_reset_tokens"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    token = Column(String(255), nullable=False, unique=True, index=True)
    doctor_id = Column(Uuid, ForeignKey("doctors.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    used_at = Column(DateTime(timezone=True), nullable=True)

    doctor = relationship("Doctor", back_populates="password_reset_tokens")

    def __repr__(self):
        return f"<PasswordResetToken for doctor {self.doctor_id}>"

    @property
    def is_expired(self) -> bool:
        expires_at = self.expires_at
        # SQLite hands back naive UTC values
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expires_at
