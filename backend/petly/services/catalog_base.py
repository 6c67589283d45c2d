"""
Petly Backend: Abstract Pet Catalog Interface
===============================================

What:  Contract for a remote source of adoptable dogs and shelters.
How:   Concrete catalogs inherit from ExternalCatalog and return records
       already normalized to the local store shapes (camelCase keys, string
       ids, `breedId` None, placeholder pictures filled in).
Who:   Called by the merger and the dog/shelter routes.

Implementations:
    - PetfinderCatalog: Petfinder v2 API (petly/services/petfinder_service.py)
    - Tests substitute an in-memory fake (tests/conftest.py)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional


Record = Dict[str, Any]


class ExternalCatalog(ABC):
    """
    Remote catalog contract.

    Absence versus failure:
        get_dog() and get_shelter() return None when the remote source says
        the entity does not exist. Every other failure raises UpstreamError.
    """

    @abstractmethod
    async def list_dogs(self, filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """
        Search remote dogs with the local filter vocabulary
        (name, breedId, gender, age, goodWKids, goodWDogs, goodWCats, shelterId).
        """
        ...

    @abstractmethod
    async def get_dog(self, dog_id: str) -> Optional[Record]:
        """One remote dog with its `shelter` attached, or None."""
        ...

    @abstractmethod
    async def list_shelters(self, filters: Optional[Mapping[str, Any]] = None) -> List[Record]:
        """Search remote shelters by name, city, state, postcode."""
        ...

    @abstractmethod
    async def get_shelter(self, shelter_id: str) -> Optional[Record]:
        """One remote shelter with its `adoptableDogs` attached, or None."""
        ...

    @abstractmethod
    async def list_breed_names(self) -> List[str]:
        """Every dog breed name the remote source knows, in its order."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Whether the remote source is reachable and accepts our credentials.
        Called by the health endpoint; never raises.
        """
        ...
