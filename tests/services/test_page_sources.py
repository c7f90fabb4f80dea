"""Tests for the HTTP section source and its stale-response guard."""

import asyncio

import httpx
import pytest

from sitecms.core.exceptions import SectionSourceError, StaleResponseError
from sitecms.rendering.renderer import SECTION_ERROR_MESSAGE
from sitecms.schemas.sections import PlaceholderContent
from sitecms.services.page_service import PageComposer
from sitecms.services.page_sources import ApiSectionSource, RequestSequencer

pytestmark = pytest.mark.unit

PAGE = {"id": 1, "slug": "home", "title": "Home"}
SECTIONS = [
    {"id": 10, "pageId": 1, "sectionType": "cta", "sortOrder": 2, "isVisible": True},
    {"id": 11, "pageId": 1, "sectionType": "pricing", "sortOrder": 1, "pricingSectionId": 3},
]


def _source(handler, **kwargs) -> ApiSectionSource:
    return ApiSectionSource("http://cms.test", transport=httpx.MockTransport(handler), **kwargs)


def _happy_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/admin/pages/by-slug/home":
        return httpx.Response(200, json={"success": True, "data": PAGE})
    if request.url.path == "/api/admin/page-sections":
        assert request.url.params["pageSlug"] == "home"
        return httpx.Response(200, json={"success": True, "data": SECTIONS})
    return httpx.Response(404, json={"success": False, "message": "Not found"})


class TestRequestSequencer:
    def test_latest_sequence_is_accepted(self):
        sequencer = RequestSequencer()
        first = sequencer.next("preview")
        second = sequencer.next("preview")

        sequencer.check("preview", second)
        with pytest.raises(StaleResponseError):
            sequencer.check("preview", first)

    def test_slots_are_independent(self):
        sequencer = RequestSequencer()
        a = sequencer.next("a")
        sequencer.next("b")
        sequencer.check("a", a)


class TestApiSectionSource:
    async def test_loads_page_and_sections(self):
        source = _source(_happy_handler)
        loaded = await source.load_page("home")
        await source.aclose()

        assert loaded.page.slug == "home"
        assert [s.id for s in loaded.sections] == [10, 11]
        assert loaded.sections[1].pricing_section_id == 3

    async def test_unknown_page_is_none(self):
        source = _source(_happy_handler)
        assert await source.load_page("nope") is None
        await source.aclose()

    async def test_server_error_raises_source_error(self):
        source = _source(lambda request: httpx.Response(500, json={"success": False}))
        with pytest.raises(SectionSourceError):
            await source.load_page("home")
        await source.aclose()

    async def test_network_error_raises_source_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source = _source(handler)
        with pytest.raises(SectionSourceError):
            await source.load_page("home")
        await source.aclose()

    async def test_admin_token_header_is_sent(self):
        seen = []

        def handler(request):
            seen.append(request.headers.get("x-admin-token"))
            return _happy_handler(request)

        source = _source(handler, admin_token="s3cret")
        await source.load_page("home")
        await source.aclose()
        assert seen == ["s3cret", "s3cret"]

    async def test_load_pricing_parses_matrix(self):
        def handler(request):
            assert request.url.params["billingCycleId"] == "yearly"
            return httpx.Response(
                200,
                json={"state": "ok", "pricingSectionId": 3, "heading": "Plans", "selectedBillingCycleId": "yearly"},
            )

        source = _source(handler)
        matrix = await source.load_pricing(3, "yearly")
        await source.aclose()
        assert matrix.state == "ok"
        assert matrix.selected_billing_cycle_id == "yearly"

    async def test_missing_pricing_section_is_empty(self):
        source = _source(lambda request: httpx.Response(404, json={"success": False}))
        matrix = await source.load_pricing(3)
        await source.aclose()
        assert matrix.state == "empty"

    async def test_superseded_load_is_discarded(self):
        gate = asyncio.Event()
        page_calls = 0

        async def handler(request):
            nonlocal page_calls
            if request.url.path.startswith("/api/admin/pages/by-slug/"):
                page_calls += 1
                if page_calls == 1:
                    await gate.wait()
            return _happy_handler(request)

        source = _source(handler)
        first = asyncio.create_task(source.load_page("home", slot="preview"))
        while page_calls == 0:
            await asyncio.sleep(0)

        second = await source.load_page("home", slot="preview")
        gate.set()

        assert second.page.slug == "home"
        with pytest.raises(StaleResponseError):
            await first
        await source.aclose()


def _sections_handler(sections):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/admin/page-sections":
            return httpx.Response(200, json={"success": True, "data": sections})
        return _happy_handler(request)

    return handler


class TestMalformedSections:
    BROKEN_HERO = {
        "id": 11,
        "pageId": 1,
        "sectionType": "hero",
        "sortOrder": 1,
        "heroSectionId": 4,
        "heroSection": {"id": 4},
    }
    CTA = {"id": 10, "pageId": 1, "sectionType": "cta", "sortOrder": 2}

    async def test_bad_section_is_kept_with_its_error(self):
        source = _source(_sections_handler([self.CTA, self.BROKEN_HERO]))
        loaded = await source.load_page("home")
        await source.aclose()

        assert [s.id for s in loaded.sections] == [10, 11]
        assert loaded.sections[1].hero_section is None
        assert loaded.sections[1].hero_section_id == 4
        assert list(loaded.section_errors) == [11]
        assert "headline" in loaded.section_errors[11]

    async def test_bad_section_becomes_error_block(self):
        source = _source(_sections_handler([self.CTA, self.BROKEN_HERO]))
        page = await PageComposer(source).compose("home")
        await source.aclose()

        assert page.state == "ok"
        hero, cta = page.sections
        assert hero.id == 11
        assert isinstance(hero.content, PlaceholderContent)
        assert hero.content.message == SECTION_ERROR_MESSAGE
        assert hero.error
        assert cta.id == 10
        assert cta.error is None

    async def test_unreadable_row_fails_the_page(self):
        source = _source(_sections_handler([self.CTA, {"id": 12, "heroSection": {"id": 4}}]))
        with pytest.raises(SectionSourceError):
            await source.load_page("home")

        page = await PageComposer(source).compose("home")
        await source.aclose()
        assert page.state == "error"
