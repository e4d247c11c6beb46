"""
Integration tests for API endpoints (api/main.py)

The pipeline dependency is overridden with one built over the fake
renderer/rasterizer from tests/conftest.py, so no browser or Node.js is
started.
"""
import pytest
from fastapi.testclient import TestClient
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from api.main import app, get_pipeline


@pytest.fixture
def client_for():
    """Factory: TestClient whose requests use the given pipeline"""
    def _client(pipeline):
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        return TestClient(app)
    yield _client
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_for, make_pipeline):
    return client_for(make_pipeline())


class TestRenderEndpoint:
    """POST /api/render"""

    def test_inline_formula(self, client):
        response = client.post("/api/render", json={"text": "Energy: $E=mc^2$ is famous."})

        assert response.status_code == 200
        html = response.json()["html"]
        assert html.startswith("Energy: <img")
        assert 'alt="E=mc^2"' in html
        assert 'class="formula-inline"' in html
        assert html.endswith(" is famous.")

    def test_options_forwarded(self, client, fake_session, fake_rasterizer):
        response = client.post(
            "/api/render",
            json={"text": "$x$", "options": {"fontSize": 30, "background": "#ffffff", "scale": 3}},
        )

        assert response.status_code == 200
        assert "font-size: 30px;" in fake_session.documents[0]
        assert fake_session.captures == [(".wrap", False)]
        assert fake_rasterizer.scales == [3]

    def test_no_math(self, client, fake_rasterizer):
        response = client.post("/api/render", json={"text": "a < b"})

        assert response.json() == {"html": "a &lt; b"}
        assert fake_rasterizer.opened == 0

    def test_image_written_to_store(self, client, image_store):
        response = client.post("/api/render", json={"text": "$$\\int_0^1 x\\,dx$$"})

        assert response.status_code == 200
        assert 'class="formula-block"' in response.json()["html"]
        assert len(list(image_store.image_dir.glob("*.png"))) == 1

    @pytest.mark.parametrize("payload", [
        {"text": 42},
        {"text": None},
        {"text": ["$x$"]},
        {"options": {"fontSize": 20}},
    ])
    def test_non_string_text_is_400(self, client, payload):
        response = client.post("/api/render", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "text must be a string"}

    def test_render_failure_is_500(self, client_for, make_pipeline, failing_rasterizer):
        client = client_for(make_pipeline(rasterizer=failing_rasterizer))

        response = client.post("/api/render", json={"text": "ok $x$"})

        assert response.status_code == 500
        assert "error" in response.json()
        assert "html" not in response.json()


class TestAPIBasics:
    """Health and static content"""

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_root_serves_demo_page_uncached(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers.get("content-type", "")
        assert "no-store" in response.headers["cache-control"]
        assert response.headers["pragma"] == "no-cache"


class TestRequestSizeLimit:
    """Body size limit on /api/render"""

    @pytest.fixture
    def small_limit(self, monkeypatch):
        from config.settings import settings

        monkeypatch.setattr(settings, "max_request_bytes", 100)

    def test_oversized_body_is_413(self, client, small_limit, fake_renderer):
        response = client.post("/api/render", json={"text": "$x$ " * 100})

        assert response.status_code == 413
        assert "error" in response.json()
        assert fake_renderer.calls == []

    def test_oversized_chunked_body_is_413(self, client, small_limit, fake_renderer):
        payload = b'{"text": "' + b"x" * 500 + b'"}'

        response = client.post(
            "/api/render",
            content=iter([payload]),
            headers={"content-type": "application/json"},
        )

        assert response.status_code == 413
        assert fake_renderer.calls == []

    def test_body_under_limit_accepted(self, client, small_limit):
        response = client.post("/api/render", json={"text": "$x$"})

        assert response.status_code == 200
