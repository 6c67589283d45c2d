"""Breed lookup table: integer id → breed name."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from petly.database import Base


class Breed(Base):
    __tablename__ = "breeds"

    # Ids are assigned by the sync job (remote order), not by a sequence
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    breed: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Breed(id={self.id}, breed='{self.breed}')>"
