"""
Pytest configuration and shared fixtures for MathSnap tests.
"""
import html
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mathsnap.errors import RenderContainerMissingError
from mathsnap.pipeline import MathHtmlPipeline
from mathsnap.sanitizer import HtmlSanitizer
from mathsnap.storage import ImageStore


# ============================================================================
# Fakes: rendering collaborators
# ============================================================================

class FakeRenderer:
    """Returns predictable markup and records every call"""

    name = "fake"
    stylesheet_path = None

    def __init__(self):
        self.calls = []

    async def render(self, latex, display_mode=False):
        self.calls.append((latex, display_mode))
        return f'<span class="katex">{html.escape(latex)}</span>'


class FakeSession:
    """Raster session that records loaded pages and returns fixed PNG bytes"""

    PNG = b"\x89PNG\r\n\x1a\nfake"

    def __init__(self, error=None):
        self.documents = []
        self.captures = []
        self.error = error

    async def load_markup(self, markup):
        self.documents.append(markup)

    async def capture_element(self, selector, omit_background=False):
        if self.error is not None:
            raise self.error
        self.captures.append((selector, omit_background))
        return self.PNG


class FakeRasterizer:
    """Counts opened/closed sessions"""

    def __init__(self, session=None):
        self.session_obj = session or FakeSession()
        self.opened = 0
        self.closed = 0
        self.scales = []

    @asynccontextmanager
    async def session(self, scale=2.0):
        self.opened += 1
        self.scales.append(scale)
        try:
            yield self.session_obj
        finally:
            self.closed += 1


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_rasterizer(fake_session):
    return FakeRasterizer(fake_session)


@pytest.fixture
def failing_rasterizer():
    """Rasterizer whose session never finds the render container"""
    return FakeRasterizer(FakeSession(error=RenderContainerMissingError("Render container '.wrap' not found")))


@pytest.fixture
def image_store(tmp_path):
    return ImageStore(tmp_path / "images", "/images")


@pytest.fixture
def make_pipeline(fake_renderer, fake_rasterizer, image_store):
    """Factory: pipeline over fakes, sanitizer on by default"""
    def _make(rasterizer=None, sanitize=True, profile="default"):
        return MathHtmlPipeline(
            renderer=fake_renderer,
            rasterizer=rasterizer or fake_rasterizer,
            store=image_store,
            sanitizer=HtmlSanitizer() if sanitize else None,
            profile=profile,
        )
    return _make


# ============================================================================
# Session-level Setup
# ============================================================================

def pytest_configure(config):
    """Register markers"""
    config.addinivalue_line("markers", "unit: pure unit tests")
    config.addinivalue_line("markers", "integration: HTTP API tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Auto-add 'unit' marker to test files in tests/unit/
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        # Auto-add 'integration' marker to test files in tests/integration/
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
