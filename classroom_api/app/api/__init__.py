"""
API package containing versioned routes.

Besides the version subpackages this package holds the pieces of the
request boundary shared between versions: payload validation
(``validation``), the error‑kind‑to‑status table (``errors``) and
the request‑scoped service dependency (``deps``).
"""
