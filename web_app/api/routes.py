"""API routes implementation.

Paths come from ``shortlink.routes.Route`` so that every route registered here
is also a reserved identifier segment. The redirect route is registered last.
"""

from typing import Callable, List, Optional

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import Limiter

from shortlink.routes import Route

from .schemas import CreateLinkRequest, ErrorResponse, LinkSchema

_INTERNAL = {500: {"model": ErrorResponse, "description": "Internal server error"}}
_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Link matching ID not found"}}
_RATE_LIMITED = {429: {"model": ErrorResponse, "description": "Too many requests"}}


def create_api_router(limiter: Optional[Limiter] = None, rate_limit: Optional[str] = None) -> APIRouter:
    """Build the API router.

    Args:
        limiter: Rate limiter applied to every endpoint; None disables limiting
        rate_limit: Per-client limit in ``limits`` notation

    Returns:
        Router with all link service endpoints
    """
    router = APIRouter(responses=_RATE_LIMITED if limiter else None)

    if limiter is not None:
        limited: Callable = limiter.limit(rate_limit)
    else:
        def limited(func):
            return func

    @router.get(
        Route.HEALTH.path,
        response_class=PlainTextResponse,
        tags=["misc"],
        summary="Health check",
        description="Simple API health check",
    )
    @limited
    async def health_check(request: Request):
        """Health check endpoint for load balancers and monitoring."""
        service = request.app.state.service

        if not await service.health_check():
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"message": "Service unhealthy"},
            )

        return PlainTextResponse("OK")

    @router.get(
        Route.METRICS.path,
        response_class=PlainTextResponse,
        tags=["misc"],
        summary="Metrics",
        description="Counters and histograms in the Prometheus text format",
    )
    @limited
    async def metrics(request: Request):
        sink = request.app.state.metrics
        return Response(content=sink.render(), media_type=sink.content_type)

    @router.post(
        Route.LINK_CREATE.path,
        response_model=LinkSchema,
        status_code=status.HTTP_201_CREATED,
        responses={
            400: {"model": ErrorResponse, "description": "Bad request"},
            413: {"model": ErrorResponse, "description": "Request body too large"},
            422: {"model": ErrorResponse, "description": "Request parameter(s) invalid"},
            **_INTERNAL,
        },
        tags=["links"],
        summary="Create link",
        description="Create a new shortened link. Optionally provide a custom ID.",
    )
    @limited
    async def create_link(request: Request, body: CreateLinkRequest):
        """Create a shortened link."""
        service = request.app.state.service

        link = await service.create(
            target_url=body.target_url,
            custom_id=body.custom_id,
            request_host=request.headers.get("host", ""),
        )

        return LinkSchema.from_link(link)

    @router.get(
        Route.LINK_LIST.path,
        response_model=List[LinkSchema],
        responses=_INTERNAL,
        tags=["links"],
        summary="List links",
        description="Get all existing shortened links",
    )
    @limited
    async def list_links(request: Request):
        service = request.app.state.service

        links = await service.list_links()

        return [LinkSchema.from_link(link) for link in links]

    @router.get(
        Route.LINK_GET.path,
        response_model=LinkSchema,
        responses={**_NOT_FOUND, **_INTERNAL},
        tags=["links"],
        summary="Get link",
        description="Get a specific link by the given ID",
    )
    @limited
    async def get_link(request: Request, link_id: str):
        service = request.app.state.service

        link = await service.get(link_id)

        return LinkSchema.from_link(link)

    @router.get(
        Route.LINK_REDIRECT.path,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        response_class=Response,
        responses={
            307: {"description": "Successful redirect", "headers": {
                "Location": {"description": "Target URL"},
                "Cache-Control": {"description": "Caching policy for the redirect"},
            }},
            **_NOT_FOUND,
            **_INTERNAL,
        },
        tags=["links"],
        summary="Redirect",
        description="Redirect from a link matching the given ID to its target URL",
    )
    @limited
    async def redirect_link(request: Request, link_id: str):
        """Redirect to the target URL, counting the redirect."""
        service = request.app.state.service

        target = await service.redirect(
            link_id,
            raw_query=request.url.query,
            request_headers=request.headers,
        )

        return Response(status_code=status.HTTP_307_TEMPORARY_REDIRECT, headers=target.headers)

    return router
