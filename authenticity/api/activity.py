"""
Activity route: /activity
"""

from typing import List

from fastapi import APIRouter

from authenticity.schemas.activity import ActivityEntry
from authenticity.services.activity_service import get_activity

router = APIRouter(tags=["Activity"])


@router.get("/activity", response_model=List[ActivityEntry])
async def activity():
    """Most recent scans, oldest first."""
    return get_activity()
