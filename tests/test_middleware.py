"""Tests for GTMProductViewMiddleware."""

import asyncio
from unittest.mock import MagicMock

import pytest
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from commerce_gtm.middleware import GTMProductViewMiddleware


async def product_page(request):
    return PlainTextResponse(f"product {request.path_params['product_id']}")


async def about_page(request):
    return PlainTextResponse("about")


def _make_client(tracker, resolve_variation, track_product_views=True):
    app = Starlette(
        routes=[
            Route("/product/{product_id}", product_page, methods=["GET", "POST"]),
            Route("/about", about_page),
        ]
    )
    app.add_middleware(
        GTMProductViewMiddleware,
        tracker=tracker,
        resolve_variation=resolve_variation,
        track_product_views=track_product_views,
    )
    return TestClient(app)


def _resolver(variation):
    def resolve(request):
        if request.url.path.startswith("/product/"):
            return variation
        return None

    return resolve


@pytest.fixture
def mock_tracker():
    return MagicMock()


class TestGTMProductViewMiddleware:
    def test_tracks_product_page(self, mock_tracker, variation):
        client = _make_client(mock_tracker, _resolver(variation))

        resp = client.get("/product/3")

        assert resp.status_code == 200
        assert resp.text == "product 3"
        mock_tracker.product_detail_views.assert_called_once_with([variation])

    def test_skips_non_product_pages(self, mock_tracker, variation):
        client = _make_client(mock_tracker, _resolver(variation))

        client.get("/about")

        mock_tracker.product_detail_views.assert_not_called()

    def test_skips_non_get(self, mock_tracker, variation):
        client = _make_client(mock_tracker, _resolver(variation))

        client.post("/product/3")

        mock_tracker.product_detail_views.assert_not_called()

    def test_disabled_by_default(self, mock_tracker, variation):
        resolve = MagicMock(return_value=variation)
        app = Starlette(routes=[Route("/product/{product_id}", product_page)])
        app.add_middleware(
            GTMProductViewMiddleware, tracker=mock_tracker, resolve_variation=resolve
        )

        TestClient(app).get("/product/3")

        resolve.assert_not_called()
        mock_tracker.product_detail_views.assert_not_called()

    def test_tracking_failure_does_not_break_response(self, mock_tracker, variation):
        mock_tracker.product_detail_views.side_effect = RuntimeError("boom")
        client = _make_client(mock_tracker, _resolver(variation))

        resp = client.get("/product/3")

        assert resp.status_code == 200

    def test_queues_view_item_with_real_tracker(self, tracker, storage, variation):
        client = _make_client(tracker, _resolver(variation))

        client.get("/product/3")

        events = storage.flush()
        assert [e["event"] for e in events] == ["view_item"]
        assert events[0]["ecommerce"]["items"][0]["item_id"] == "3"

    def test_tracking_runs_off_the_event_loop(self, mock_tracker, variation):
        on_loop = []

        def resolve(request):
            try:
                asyncio.get_running_loop()
                on_loop.append(True)
            except RuntimeError:
                on_loop.append(False)
            return variation

        client = _make_client(mock_tracker, resolve)
        client.get("/product/3")

        assert on_loop == [False]
        mock_tracker.product_detail_views.assert_called_once_with([variation])
