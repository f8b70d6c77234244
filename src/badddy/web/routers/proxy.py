"""
badddy.web.routers.proxy

Catch-all `/api/*` route forwarding to the backend.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from badddy.web.deps import reverse_proxy
from badddy.web.proxy import PROXY_METHODS, ReverseProxy

router = APIRouter(tags=["proxy"])


@router.api_route("/api/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
async def proxy_api(
    path: str,
    request: Request,
    proxy: ReverseProxy = Depends(reverse_proxy),
) -> Response:
    return await proxy.forward(request, path)
