"""
System / health routes.
"""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from authenticity.integrations.gemini import client as gemini_module

router = APIRouter(tags=["System"])


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "ai_second_opinion": gemini_module.client is not None,
    }


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots():
    # Internal demo service; nothing here should be indexed
    return "User-agent: *\nDisallow: /"
