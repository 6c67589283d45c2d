"""
Adopter accounts.

Preference columns (preferred_gender, preferred_age) use Petfinder's
vocabulary ("Male"/"Female", "Baby"/"Young"/"Adult"/"Senior") so they can
be fed straight into dog searches.
"""

from sqlalchemy import Boolean, Integer, String, Text, false, text
from sqlalchemy.orm import Mapped, mapped_column

from petly.database import Base


class Adopter(Base):
    __tablename__ = "adopters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False)
    picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")
    private_outdoors: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=false())
    num_of_dogs: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    preferred_gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    preferred_age: Mapped[str | None] = mapped_column(String(10), nullable=True)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=false())

    def __repr__(self) -> str:
        return f"<Adopter(id={self.id}, username='{self.username}')>"
