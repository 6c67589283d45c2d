"""
Petly Backend: SQLAlchemy Table Models
========================================

Importing this package registers every table on `Base.metadata`, which
Alembic autogenerate and the test suite's `create_all` both rely on.

Tables:
    breeds          breed lookup (synced from Petfinder)
    shelters        shelter accounts
    adopters        adopter accounts
    adoptable_dogs  dogs listed by local shelters
    fav_dogs        adopter favorites (local or remote dog references)
"""

from petly.models.breed import Breed
from petly.models.shelter import Shelter
from petly.models.adopter import Adopter
from petly.models.adoptable_dog import AdoptableDog
from petly.models.favorite import FavoriteDog

__all__ = ["Breed", "Shelter", "Adopter", "AdoptableDog", "FavoriteDog"]
