"""
Service layer abstraction.

Services encapsulate business logic and talk to storage only through
the record store interfaces in ``repositories``, so the same logic
runs against SQLite or the in‑memory backend.
"""
