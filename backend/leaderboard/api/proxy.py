"""FPL API relay route.

Registered last: /api/{path} matches anything the /api/v1 routers don't.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from leaderboard.dependencies import get_proxy_service
from leaderboard.services.fpl_proxy import FPLProxyService, RelayError

logger = logging.getLogger(__name__)
router = APIRouter(tags=["proxy"])

RELAY_ERROR_MESSAGE = "Failed to fetch data from FPL API"


@router.get("/api/{path:path}")
async def relay(
    path: str,
    request: Request,
    proxy: FPLProxyService = Depends(get_proxy_service),
) -> JSONResponse:
    """Forward a GET to the FPL API and return its JSON body unmodified."""
    try:
        data = await proxy.forward(path, list(request.query_params.multi_items()))
    except RelayError:
        return JSONResponse(status_code=500, content={"error": RELAY_ERROR_MESSAGE})
    return JSONResponse(content=data)
