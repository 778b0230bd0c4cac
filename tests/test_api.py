"""Tests of the HTTP API."""

import inspect
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from sonai.api.router import create_app
from sonai.data_models import FEATURE_NAMES
from sonai.training.model_store import FilesystemModelStore
from tests.conftest import AI_EXAMPLE, HUMAN_EXAMPLE


@pytest.fixture
def client(model_path: Path) -> Iterator[TestClient]:
    with TestClient(create_app(FilesystemModelStore(model_path))) as client:
        yield client


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/v1/healthcheck")

    assert response.status_code == 200
    assert response.json() == {"is_healthy": True}


def test_root_redirects_to_docs(client: TestClient) -> None:
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/v1/docs"


@pytest.mark.parametrize(
    ("text", "verdict"), [(AI_EXAMPLE, "AI"), (HUMAN_EXAMPLE, "Human")]
)
def test_prediction(client: TestClient, text: str, verdict: str) -> None:
    response = client.post("/v1/predict", json={"text": text})

    body = response.json()
    assert response.status_code == 200
    assert body["most_likely"] == verdict
    assert body["chance_ai"] + body["chance_human"] == pytest.approx(100.0)
    assert set(body["metrics"]) == set(FEATURE_NAMES)


def test_request_without_text_is_rejected(client: TestClient) -> None:
    response = client.post("/v1/predict", json={})

    assert response.status_code == 422


def test_missing_model_prevents_startup(tmp_path: Path) -> None:
    app = create_app(FilesystemModelStore(tmp_path / "absent.json"))

    with pytest.raises(FileNotFoundError), TestClient(app):
        pass


def test_prediction_runs_outside_the_event_loop() -> None:
    from sonai.api.router import predict

    assert not inspect.iscoroutinefunction(predict)
