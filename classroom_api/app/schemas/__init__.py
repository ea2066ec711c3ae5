"""
Pydantic schema definitions for API payloads.

Request schemas are only used through the validation functions in
``api.validation``; response schemas are used as ``response_model``
on the routes.
"""
