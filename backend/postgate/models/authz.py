from __future__ import annotations
from sqlalchemy.orm import declarative_base, relationship, Mapped, mapped_column, validates
from sqlalchemy import String, Integer, DateTime, func
from postgate.constants.permissions import DEFAULT_ROLE, ROLE_NAMES

Base = declarative_base()


class User(Base):
    __tablename__ = 'users'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # Assigned at creation; no API changes it afterwards.
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=DEFAULT_ROLE.value)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    posts = relationship('Post', back_populates='author', cascade='all, delete-orphan')

    @validates('role')
    def _validate_role(self, key, value):
        value = getattr(value, 'value', value)
        if value not in ROLE_NAMES:
            raise ValueError(f'role must be one of {ROLE_NAMES}')
        return value

    def set_password(self, raw: str):
        from werkzeug.security import generate_password_hash
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        from werkzeug.security import check_password_hash
        return check_password_hash(self.password_hash, raw)
