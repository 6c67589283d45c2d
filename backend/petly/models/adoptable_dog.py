"""
Petly Backend: Adoptable Dog Model
====================================

What:  The `adoptable_dogs` table: dogs listed by local shelters.

Column notes:
    - breed_id: local breed lookup id; Petfinder dogs never appear here, so
      the name-vs-id split only exists across sources, not inside this table
    - good_w_kids / good_w_dogs / good_w_cats: nullable booleans, NULL
      meaning unknown. A NULL never matches an exact true/false filter.
    - shelter_id: owning shelter; deleting the shelter deletes its dogs.
      Favorites are not linked by foreign key and are left in place.
"""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from petly.database import Base


class AdoptableDog(Base):
    __tablename__ = "adoptable_dogs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    breed_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("breeds.id"), nullable=True
    )
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    age: Mapped[str | None] = mapped_column(String(10), nullable=True)
    picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default="")

    # ── Compatibility (tri-state) ─────────────────────────────────────────
    good_w_kids: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    good_w_dogs: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    good_w_cats: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    shelter_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("shelters.id", ondelete="CASCADE"), nullable=False
    )

    # Shelter hydration lists dogs by owner on every shelter read
    __table_args__ = (
        Index("idx_adoptable_dogs_shelter_id", "shelter_id"),
    )

    def __repr__(self) -> str:
        return f"<AdoptableDog(id={self.id}, name='{self.name}', shelter_id={self.shelter_id})>"
