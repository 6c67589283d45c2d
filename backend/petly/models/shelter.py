"""
Petly Backend: Shelter Model
==============================

What:  The `shelters` table: organizations that list dogs for adoption.
Who:   Read and written by ShelterStore (petly/services/stores.py) through
       parameterized SQL; Alembic and the test suite use this model for DDL.

Column notes:
    - username: unique login name; the UNIQUE constraint backs the
      duplicate-username pre-check against concurrent registrations
    - password: bcrypt hash, never returned by any store read
    - logo: URL string; the configured placeholder when none was given
"""

from sqlalchemy import Boolean, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from petly.database import Base


class Shelter(Base):
    __tablename__ = "shelters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Credentials ───────────────────────────────────────────────────────
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)

    # ── Profile ───────────────────────────────────────────────────────────
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    city: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)
    postcode: Mapped[str] = mapped_column(String(10), nullable=False, server_default="")
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    logo: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=false())

    def __repr__(self) -> str:
        return f"<Shelter(id={self.id}, username='{self.username}')>"
