"""End-to-end route tests against a mock upstream."""

import httpx
import pytest
from fastapi.testclient import TestClient

from termfolio.api.routes import (
    INVALID_ANALYZE_REQUEST,
    INVALID_CHAT_MESSAGE,
    INVALID_SCRAPE_URL,
    SCRAPE_SCHEME_REQUIRED,
)
from termfolio.main import app as main_app

CARD_PAGE = """
<html><head><title>Startup Directory</title>
<meta name="description" content="A list of promising startups"></head>
<body>
<h1>Top Startups</h1>
<p>Our directory lists companies building useful things for everyone.</p>
<div class="company-card"><h3>Acme Robotics</h3><p>Builds warehouse robots for retailers.</p>
<span class="tag">Robotics</span><span class="location">San Francisco</span>
<a href="https://acme.test">Visit</a><img src="/acme.png" alt="Acme logo"></div>
</body></html>
"""

PLAIN_PAGE = """
<html><head><title>Plain Page</title></head>
<body><h1>Hello</h1><p>This paragraph is long enough to be kept by the extractor.</p></body></html>
"""


class _Upstream:
    """Records requests and answers with a canned response."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


class TestScrapeRoute:
    def test_json_array_end_to_end(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, json=[{"a": 1}, {"a": 2}]))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://mock.test/data", "dataType": "json"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["totalItems"] == 2
        assert body["data"] == [{"a": 1}, {"a": 2}]
        assert body["csvContent"] == '"a"\n"1"\n"2"'
        assert upstream.requests[0].headers["accept"] == "application/json, text/plain, */*"

    @pytest.mark.parametrize(
        "url",
        ["ftp://example.com/file.csv", "mailto:someone@example.com", "file:///etc/passwd"],
    )
    def test_non_web_scheme_is_rejected_without_fetch(self, make_app, url: str) -> None:
        upstream = _Upstream(httpx.Response(200, text="<html></html>"))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": url})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": SCRAPE_SCHEME_REQUIRED}
        assert upstream.requests == []

    @pytest.mark.parametrize(
        "payload",
        [{"url": "not a url"}, {"url": "example.com"}, {}, {"url": "https://x.test", "dataType": "xml"}],
    )
    def test_invalid_body_is_rejected_without_fetch(self, make_app, payload: dict) -> None:
        upstream = _Upstream(httpx.Response(200, text="<html></html>"))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": INVALID_SCRAPE_URL}
        assert upstream.requests == []

    def test_json_object_without_arrays_is_single_item(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, json={"login": "octocat", "id": 1}))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://api.mock.test/users/octocat"})

        body = resp.json()
        assert body["success"] is True
        assert body["totalItems"] == 1
        assert body["data"] == [{"login": "octocat", "id": 1}]

    def test_json_null_reports_no_data(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, content=b"null", headers={"content-type": "application/json"}))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://mock.test/empty.json"})

        assert resp.status_code == 200
        assert resp.json() == {"success": False, "error": "No data found to scrape from the provided URL"}

    def test_upstream_status_is_reported_as_data(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(404))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://mock.test/missing", "dataType": "api"})

        assert resp.status_code == 200
        assert resp.json() == {"success": False, "error": "Failed to fetch API data: HTTP 404: Not Found"}

    def test_invalid_json_body_from_upstream(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, text="<html>not json</html>"))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://mock.test/feed", "dataType": "json"})

        body = resp.json()
        assert body["success"] is False
        assert body["error"].startswith("Failed to fetch API data: ")

    def test_network_error_on_html_path(self, make_app) -> None:
        upstream = _Upstream(httpx.ConnectError("connection refused"))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://unreachable.test/"})

        assert resp.status_code == 200
        assert resp.json() == {"success": False, "error": "Failed to scrape HTML: connection refused"}

    def test_html_cards_become_structured_items(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, text=CARD_PAGE))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://directory.test/startups"})

        body = resp.json()
        assert body["success"] is True
        # the company-card div matches both the directory and the generic card pattern
        assert body["totalItems"] == 2
        first = body["data"][0]
        assert first["type"] == "structured_item"
        assert first["id"] == 1
        assert first["itemTitle"] == "Acme Robotics"
        assert first["itemTags"] == 'class="tag">Robotics<, Robotics'
        assert first["itemLocation"] == "San Francisco"
        assert first["itemUrl"] == "https://acme.test"
        assert first["itemImage"] == "/acme.png"
        assert first["extractionMethod"] == "Company/Startup Directory"
        assert first["contentQuality"]["hasStructuredData"] is True

        header = body["csvContent"].split("\n")[0]
        assert '"contentQuality_hasStructuredData"' in header
        assert '"contentQuality_contentRichness"' in header
        assert upstream.requests[0].headers["user-agent"] == "test-agent/1.0"

    def test_html_without_cards_is_one_summary(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, text=PLAIN_PAGE))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://plain.test/"})

        body = resp.json()
        assert body["totalItems"] == 1
        record = body["data"][0]
        assert record["type"] == "website_summary"
        assert record["title"] == "Plain Page"
        assert record["description"] == "No description found"
        assert record["headings"] == ["Hello"]

    def test_preview_is_capped_at_five(self, make_app) -> None:
        upstream = _Upstream(httpx.Response(200, json={"items": [{"n": i} for i in range(12)]}))
        client = TestClient(make_app(upstream))

        resp = client.post("/api/scrape", json={"url": "https://mock.test/list", "dataType": "json"})

        body = resp.json()
        assert body["totalItems"] == 12
        assert len(body["data"]) == 5
        assert len(body["csvContent"].split("\n")) == 13


class TestChatRoute:
    def test_demo_mode_echoes_question(self, make_app) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/ai-chat", json={"message": "what do you work on?"})

        assert resp.status_code == 200
        text = resp.json()["response"]
        assert "Demo Mode" in text
        assert 'Based on your question: "what do you work on?"' in text

    @pytest.mark.parametrize("payload", [{"message": ""}, {"message": "x" * 1001}, {}])
    def test_invalid_message(self, make_app, payload: dict) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/ai-chat", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"error": INVALID_CHAT_MESSAGE}


class TestAnalyzeRoute:
    def test_analysis_payload(self, make_app) -> None:
        client = TestClient(make_app())
        content = (
            "Acme provides Python and React tooling for startups in Berlin. "
            "The company builds analytics dashboards for growing teams."
        )

        resp = client.post(
            "/api/ai-analyze",
            json={"content": content, "url": "https://acme.test/about", "analysisType": "summary"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        analysis = body["analysis"]
        assert set(analysis) == {"summary", "entities", "insights", "keywords", "relevanceScore", "contentType"}
        assert "Python" in analysis["entities"]
        assert analysis["contentType"] == "Company Directory"
        assert 0 <= analysis["relevanceScore"] <= 100

    @pytest.mark.parametrize(
        "payload",
        [{"content": "", "url": "https://a.test"}, {"content": "text", "url": "nope"}, {"content": "text"}],
    )
    def test_invalid_request(self, make_app, payload: dict) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/ai-analyze", json=payload)

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": INVALID_ANALYZE_REQUEST}


class TestCommandRoute:
    def test_plain_output(self, make_app) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/command", json={"input": "contact linkedin"})

        assert resp.status_code == 200
        body = resp.json()
        assert "https://www.linkedin.com/in/suraj-yadav-5620902b2/" in body["output"]
        assert body["action"] is None

    def test_sentinel_becomes_action(self, make_app) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/command", json={"input": "clear"})

        assert resp.json() == {"output": "", "action": "CLEAR_SCREEN", "argument": None}

    def test_scrape_sentinel_carries_url(self, make_app) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/command", json={"input": "scrape https://mock.test/posts"})

        assert resp.json() == {"output": "", "action": "SCRAPE_URL", "argument": "https://mock.test/posts"}

    def test_ask_goes_through_chat_relay(self, make_app) -> None:
        client = TestClient(make_app())

        resp = client.post("/api/command", json={"input": "ask what is your stack?"})

        assert 'Based on your question: "what is your stack?"' in resp.json()["output"]


def test_health() -> None:
    resp = TestClient(main_app).get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
