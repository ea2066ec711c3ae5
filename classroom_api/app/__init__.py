"""
Application package initializer.

The API is split into a few small layers: ``core`` (configuration,
logging, database and error kinds), ``repositories`` (record stores
for teachers and students), ``services`` (the association logic) and
``api`` (versioned HTTP routes, validation and error mapping).
"""

from .main import app  # noqa: F401
