"""
Top-level API router.

Aggregates the resource routers under a single router that ``main``
mounts at ``/api``.
"""

from fastapi import APIRouter

from .endpoints import members

router = APIRouter()

router.include_router(members.router, prefix="/members", tags=["members"])
