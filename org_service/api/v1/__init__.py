"""
API v1 Router

Mounted under the service's API prefix (``/api/organizations`` by default).
"""

from fastapi import APIRouter

from . import members, organizations

router = APIRouter()

router.include_router(organizations.router, tags=["Organizations"])
router.include_router(members.router, tags=["Members"])
