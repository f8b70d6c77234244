"""
badddy.web.proxy

Reverse proxy from the web service to the backend API.

Responsibilities:
- Require a session before anything reaches the backend (else redirect to login).
- Replace any inbound credentials with a freshly minted bearer token.
- Relay the backend's status and body verbatim, minus transport framing headers.
- Degrade to a generic 500 when the backend or identity service is unreachable
  or answers garbage.
"""

from __future__ import annotations

import httpx
import structlog
from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from badddy.web.session import IdentitySessionClient

log = structlog.get_logger(__name__)

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

# Never relayed to the backend: wrong target host, replaced credentials, or
# framing that httpx recomputes for the re-sent body.
DROPPED_REQUEST_HEADERS = frozenset(
    {"host", "authorization", "content-length", "transfer-encoding", "connection", "keep-alive"}
)
# Describe the backend's framing, which no longer matches once the body is re-sent.
DROPPED_RESPONSE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})


def forward_headers(inbound: Headers, *, token: str, client_ip: str | None) -> list[tuple[str, str]]:
    headers = [(k, v) for k, v in inbound.items() if k.lower() not in DROPPED_REQUEST_HEADERS]
    headers.append(("authorization", f"Bearer {token}"))
    if client_ip:
        prior = inbound.get("x-forwarded-for")
        headers = [(k, v) for k, v in headers if k.lower() != "x-forwarded-for"]
        headers.append(("x-forwarded-for", f"{prior}, {client_ip}" if prior else client_ip))
    return headers


def relay_response(upstream: httpx.Response) -> Response:
    response = Response(content=upstream.content, status_code=upstream.status_code)
    for name, value in upstream.headers.multi_items():
        if name.lower() not in DROPPED_RESPONSE_HEADERS:
            response.headers.append(name, value)
    return response


class ReverseProxy:
    def __init__(
        self,
        *,
        backend_url: str,
        sessions: IdentitySessionClient,
        http: httpx.AsyncClient,
        login_path: str = "/login",
    ) -> None:
        self._backend_url = backend_url.rstrip("/")
        self._sessions = sessions
        self._http = http
        self._login_path = login_path

    def target_url(self, path: str) -> str:
        return f"{self._backend_url}/api/{path.lstrip('/')}"

    async def forward(self, request: Request, path: str) -> Response:
        cookie = request.headers.get("cookie")
        try:
            # Strict order: session, then token, then the backend call.
            session = await self._sessions.get_session(cookie)
            if session is None:
                return RedirectResponse(self._login_path)
            token = await self._sessions.get_token(cookie)
            if token is None:
                log.warning("proxy.token_unavailable", user_id=session.user_id)
                return RedirectResponse(self._login_path)

            upstream_request = self._http.build_request(
                request.method,
                self.target_url(path),
                params=list(request.query_params.multi_items()),
                headers=forward_headers(
                    request.headers,
                    token=token,
                    client_ip=request.client.host if request.client else None,
                ),
                content=await request.body(),
            )
            upstream = await self._http.send(upstream_request)
        except (httpx.HTTPError, ValueError) as e:
            # ValueError: an upstream answered with a body that is not JSON.
            log.error("proxy.failed", target=self.target_url(path), error=str(e), exc_info=e)
            return JSONResponse({"error": "Failed to proxy request"}, status_code=500)

        log.info(
            "proxy.forwarded",
            target=self.target_url(path),
            status_code=upstream.status_code,
            user_id=session.user_id,
        )
        return relay_response(upstream)


# --- Module Notes -----------------------------------------------------------
# The route itself is declared in `web.routers.proxy`; this module stays framework-light
# so the header rules can be tested without an app.
