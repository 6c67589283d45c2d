"""Adopter favorites. `dog_id` is text: a local id ("12") or a Petfinder id."""

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from petly.database import Base


class FavoriteDog(Base):
    __tablename__ = "fav_dogs"

    # Insertion order of favorites is the order of this id
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    adopter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("adopters.id", ondelete="CASCADE"), nullable=False
    )
    dog_id: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint("adopter_id", "dog_id", name="uq_fav_dogs_adopter_dog"),
    )

    def __repr__(self) -> str:
        return f"<FavoriteDog(adopter_id={self.adopter_id}, dog_id='{self.dog_id}')>"
