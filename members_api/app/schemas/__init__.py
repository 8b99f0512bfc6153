"""
Pydantic schema definitions for API payloads.

Schemas describe request and response bodies and are kept separate
from the SQL used by the services.
"""
