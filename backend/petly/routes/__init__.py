# Routes package init
"""
Petly Backend: API Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.
How:   One module per resource, all mounted under /api.

Route Inventory:
    - auth.py:       /api/auth/{shelters,adopters}/{register,token}
    - shelters.py:   /api/shelters        (search, read, admin CRUD, contact)
    - adopters.py:   /api/adopters        (profiles, favorites list)
    - favorites.py:  /api/favorites       (favorite / unfavorite)
    - dogs.py:       /api/dogs            (search, read, shelter CRUD)
    - breeds.py:     /api/breeds          (breed lookup table)
    - health.py:     /api/health          (service health check)

Design Principle:
    Routes are THIN. They check the caller, then hand off to a store,
    the merger or the favorites ledger. Business logic belongs in
    petly/services/.
"""
