"""Example page routes rendered through the request layout."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from layoutware.src.core.layout import Layout
from layoutware.src.core.responses import LayoutResponse, get_layout

router = APIRouter()


@router.get("/")
async def index(layout: Optional[Layout] = Depends(get_layout)):
    """Render the index page inside the application layout."""
    body = "<p>It works!</p>"
    if layout is None:
        return PlainTextResponse(body)
    layout.content = body
    return LayoutResponse(layout)
