"""Starlette middleware that tracks product detail views.

Disabled unless ``track_product_views=True``; every tracked view queues an
event for the visitor.

Usage::

    from starlette.applications import Starlette
    from commerce_gtm import GTMProductViewMiddleware

    def default_variation(request):
        product = catalog.get(request.path_params.get("product_id"))
        return product.default_variation if product else None

    app = Starlette(routes=[...])
    app.add_middleware(
        GTMProductViewMiddleware,
        tracker=tracker,
        resolve_variation=default_variation,
        track_product_views=True,
    )
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from commerce_gtm.commerce import ProductVariation

logger = logging.getLogger(__name__)


class GTMProductViewMiddleware(BaseHTTPMiddleware):
    """Records a ``view_item`` event for GET requests on product pages.

    ``resolve_variation`` receives the request and returns the product's
    default variation, or None for anything that is not a product page.
    """

    def __init__(
        self,
        app: Any,
        tracker: Any,
        resolve_variation: Callable[[Request], Optional[ProductVariation]],
        track_product_views: bool = False,
    ) -> None:
        super().__init__(app)
        self.tracker = tracker
        self.resolve_variation = resolve_variation
        self.track_product_views = track_product_views

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.track_product_views and request.method == "GET":
            await run_in_threadpool(self._track, request)
        return await call_next(request)

    def _track(self, request: Request) -> None:
        # Runs in a worker thread; price calculation may block on I/O.
        try:
            variation = self.resolve_variation(request)
            if variation is not None:
                self.tracker.product_detail_views([variation])
        except Exception:
            logger.exception("GTM product view tracking failed for %s", request.url.path)
