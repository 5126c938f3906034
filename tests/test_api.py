import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient
from openai import OpenAIError

from evfunding.app import EVALUATION_FAILED, create_app
from evfunding.llm import LLMClient
from evfunding.models import ProjectForm
from evfunding.pipeline import EvaluationPipeline
from evfunding.web import NO_EVIDENCE, WebScraper, WebSearchClient

SCENARIO_FORM = {
    "siteAddress": "123 Main St, Springfield, IL 62704",
    "utilityProvider": "Ameren",
    "numChargers": 4,
    "chargerKW": 150,
    "numPorts": 8,
    "portKW": 150,
    "usageType": "commercial",
    "publicAccess": "Public",
    "disadvantagedCommunity": "Yes",
}


def build_pipeline(settings, transport, fake_openai):
    return EvaluationPipeline(
        settings,
        search_client=WebSearchClient(settings, transport=transport),
        scraper=WebScraper(settings, transport=transport),
        llm=LLMClient(settings, client=fake_openai),
    )


@pytest.fixture
def fake_openai(make_openai):
    return make_openai(text="Federal: eligible for 30C. State: Illinois EV rebates.")


@pytest.fixture
def client(settings, web_transport, fake_openai):
    pipeline = build_pipeline(settings, web_transport, fake_openai)
    with TestClient(create_app(settings, pipeline)) as c:
        yield c


def test_evaluate_full_form(client, fake_openai):
    r = client.post("/api/evaluate", json={"formData": SCENARIO_FORM})
    assert r.status_code == 200
    assert r.json() == {"result": "Federal: eligible for 30C. State: Illinois EV rebates."}

    user_message = fake_openai.calls[0]["messages"][1]["content"]
    assert "123 Main St, Springfield, IL 62704" in user_message
    assert "Up to $5,000 per port." in user_message
    assert "Make-ready rebates for commercial sites." in user_message


def test_evaluate_empty_form(client, fake_openai):
    r = client.post("/api/evaluate", json={"formData": {}})
    assert r.status_code == 200
    assert r.json()["result"]
    user_message = fake_openai.calls[0]["messages"][1]["content"]
    assert "an unspecified address" in user_message
    assert "unknown" in user_message


def test_evaluate_without_form_data(client):
    r = client.post("/api/evaluate", json={})
    assert r.status_code == 200


def test_model_failure_returns_fixed_error(settings, web_transport, make_openai):
    failing = make_openai(error=OpenAIError("insufficient_quota: secret details"))
    pipeline = build_pipeline(settings, web_transport, failing)
    with TestClient(create_app(settings, pipeline)) as c:
        r = c.post("/api/evaluate", json={"formData": SCENARIO_FORM})
    assert r.status_code == 500
    assert r.json() == {"error": EVALUATION_FAILED}
    assert "per port" not in r.text
    assert "secret" not in r.text


def test_search_failure_still_reaches_model(settings, make_openai):
    def handler(request):
        raise httpx.ConnectError("dns failure", request=request)

    fake = make_openai(text="Answer without evidence.")
    pipeline = build_pipeline(settings, httpx.MockTransport(handler), fake)
    outcome = asyncio.run(pipeline.run(ProjectForm.model_validate(SCENARIO_FORM)))
    assert outcome.result == "Answer without evidence."
    assert outcome.urls == []
    assert outcome.failed_searches == len(outcome.queries) == 5
    assert NO_EVIDENCE in fake.calls[0]["messages"][1]["content"]


def test_pipeline_reports_failed_sources(settings, make_openai):
    def handler(request):
        if request.url.host == "serpapi.com":
            return httpx.Response(
                200,
                json={"organic_results": [{"link": "https://dead.example"}, {"link": "https://live.example"}]},
            )
        if request.url.host == "live.example":
            return httpx.Response(200, html="<body>Live grant page</body>")
        raise httpx.ConnectError("refused", request=request)

    pipeline = build_pipeline(settings, httpx.MockTransport(handler), make_openai())
    outcome = asyncio.run(pipeline.run(ProjectForm()))
    assert outcome.urls == ["https://dead.example", "https://live.example"]
    assert outcome.sources_used == 1
    assert outcome.sources_failed == 1


def test_invalid_json_body_is_rejected(client):
    r = client.post("/api/evaluate", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 422


def test_only_evaluate_route_is_exposed(client):
    assert client.get("/api/evaluate").status_code == 405
    assert client.get("/healthz").status_code == 404
