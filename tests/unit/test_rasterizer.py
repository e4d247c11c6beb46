"""
Unit tests for PlaywrightSession against a stub page (no browser needed)
"""
import pytest
from playwright.async_api import Error as PlaywrightError

from mathsnap.errors import RasterizerError, RenderContainerMissingError, RenderSizingError
from mathsnap.rasterizer import PlaywrightRasterizer, PlaywrightSession


class StubElement:
    def __init__(self, box, fail=False):
        self.box = box
        self.fail = fail
        self.screenshot_kwargs = None

    async def bounding_box(self):
        return self.box

    async def screenshot(self, **kwargs):
        if self.fail:
            raise PlaywrightError("target closed")
        self.screenshot_kwargs = kwargs
        return b"png"


class StubPage:
    def __init__(self, element=None, fail_load=False):
        self.element = element
        self.fail_load = fail_load
        self.content = None
        self.selectors = []

    async def set_content(self, html, wait_until=None, timeout=None):
        if self.fail_load:
            raise PlaywrightError("navigation failed")
        self.content = (html, wait_until, timeout)

    async def query_selector(self, selector):
        self.selectors.append(selector)
        return self.element


class TestPlaywrightSession:

    @pytest.mark.asyncio
    async def test_load_markup(self):
        page = StubPage()

        await PlaywrightSession(page, load_timeout_ms=1234).load_markup("<p>x</p>")

        assert page.content == ("<p>x</p>", "domcontentloaded", 1234)

    @pytest.mark.asyncio
    async def test_load_failure_wrapped(self):
        with pytest.raises(RasterizerError):
            await PlaywrightSession(StubPage(fail_load=True)).load_markup("x")

    @pytest.mark.asyncio
    async def test_capture(self):
        element = StubElement({"x": 0, "y": 0, "width": 40, "height": 20})
        session = PlaywrightSession(StubPage(element))

        png = await session.capture_element(".wrap", omit_background=True)

        assert png == b"png"
        assert element.screenshot_kwargs == {"type": "png", "omit_background": True}

    @pytest.mark.asyncio
    async def test_missing_container(self):
        with pytest.raises(RenderContainerMissingError):
            await PlaywrightSession(StubPage(None)).capture_element(".wrap")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("box", [
        None,
        {"x": 0, "y": 0, "width": 0, "height": 20},
        {"x": 0, "y": 0, "width": 40, "height": -1},
    ])
    async def test_zero_size(self, box):
        with pytest.raises(RenderSizingError):
            await PlaywrightSession(StubPage(StubElement(box))).capture_element(".wrap")

    @pytest.mark.asyncio
    async def test_screenshot_failure_wrapped(self):
        element = StubElement({"x": 0, "y": 0, "width": 1, "height": 1}, fail=True)

        with pytest.raises(RasterizerError):
            await PlaywrightSession(StubPage(element)).capture_element(".wrap")


class TestPlaywrightRasterizer:

    def test_from_settings(self):
        class FakeSettings:
            browser_args = ["--no-sandbox"]
            viewport_width = 1024
            viewport_height = 768
            page_load_timeout_ms = 9000

        rasterizer = PlaywrightRasterizer.from_settings(FakeSettings())

        assert rasterizer.browser_args == ["--no-sandbox"]
        assert (rasterizer.viewport_width, rasterizer.viewport_height) == (1024, 768)
        assert rasterizer.load_timeout_ms == 9000


# ============================================================================
# Session lifecycle against a stub Playwright driver
# ============================================================================

class StubBrowser:
    def __init__(self, close_error=None):
        self.close_error = close_error
        self.closed = False
        self.page_kwargs = None

    async def new_page(self, **kwargs):
        self.page_kwargs = kwargs
        return StubPage()

    async def close(self):
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class StubChromium:
    def __init__(self, browser, launch_error=None):
        self.browser = browser
        self.launch_error = launch_error
        self.launch_kwargs = None

    async def launch(self, **kwargs):
        if self.launch_error is not None:
            raise self.launch_error
        self.launch_kwargs = kwargs
        return self.browser


class StubPlaywright:
    def __init__(self, chromium):
        self.chromium = chromium
        self.stopped = False

    async def stop(self):
        self.stopped = True


@pytest.fixture
def driver(monkeypatch):
    """Patch async_playwright; returns a dict to tune the stub before a session opens"""
    state = {"close_error": None, "launch_error": None}

    class Starter:
        async def start(self):
            browser = StubBrowser(state["close_error"])
            state["browser"] = browser
            state["playwright"] = StubPlaywright(StubChromium(browser, state["launch_error"]))
            return state["playwright"]

    monkeypatch.setattr("mathsnap.rasterizer.async_playwright", lambda: Starter())
    return state


class TestPlaywrightRasterizerSession:

    @pytest.mark.asyncio
    async def test_opens_and_closes(self, driver):
        rasterizer = PlaywrightRasterizer(browser_args=["--no-sandbox"], viewport_width=640, viewport_height=480)

        async with rasterizer.session(scale=3) as session:
            assert isinstance(session, PlaywrightSession)

        assert driver["playwright"].chromium.launch_kwargs == {"headless": True, "args": ["--no-sandbox"]}
        assert driver["browser"].page_kwargs == {
            "viewport": {"width": 640, "height": 480},
            "device_scale_factor": 3,
        }
        assert driver["browser"].closed
        assert driver["playwright"].stopped

    @pytest.mark.asyncio
    async def test_body_error_still_tears_down(self, driver):
        with pytest.raises(RenderContainerMissingError):
            async with PlaywrightRasterizer().session() as session:
                raise RenderContainerMissingError("missing")

        assert driver["browser"].closed
        assert driver["playwright"].stopped

    @pytest.mark.asyncio
    async def test_failed_close_still_stops_driver(self, driver):
        driver["close_error"] = PlaywrightError("browser crashed")

        with pytest.raises(RasterizerError):
            async with PlaywrightRasterizer().session():
                pass

        assert driver["playwright"].stopped

    @pytest.mark.asyncio
    async def test_failed_close_does_not_hide_body_error(self, driver):
        driver["close_error"] = PlaywrightError("browser crashed")

        with pytest.raises(RenderSizingError):
            async with PlaywrightRasterizer().session():
                raise RenderSizingError("zero-size")

        assert driver["playwright"].stopped

    @pytest.mark.asyncio
    async def test_launch_failure_stops_driver(self, driver):
        driver["launch_error"] = PlaywrightError("no chromium")

        with pytest.raises(RasterizerError):
            async with PlaywrightRasterizer().session():
                pass

        assert driver["playwright"].stopped
