# Services package init
"""
Petly Backend: Services Layer
===============================

What:  Business logic between routes (HTTP) and storage / remote APIs.
How:   Stores and ledgers take a QueryExecutor; the catalog client takes an
       optional breed resolver. Routes build them per request through
       FastAPI dependencies.

Service Inventory:
    - QueryExecutor:      positional-parameter SQL over an AsyncSession
    - sql_for_partial_update: SET-clause builder for PATCH operations
    - EntityStore / CredentialedStore: generic CRUD, search, authentication
    - ShelterStore, AdopterStore, AdoptableDogStore: table declarations
    - BreedStore:         breed lookup table and name resolution
    - ExternalCatalog (abstract) / PetfinderCatalog: remote dogs & shelters
    - merger:             local + remote searches and lookups
    - FavoritesLedger:    adopter ↔ dog favorites
    - tokens, passwords:  JWT and bcrypt
    - EmailService:       SMTP contact messages to shelters
"""
