"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ci_dokumentor.service import create_app
from tests._fixtures.doc_builder import DocBuilder

ACTDOCS_DOC = "<!-- actdocs inputs start -->\n| a |\n<!-- actdocs inputs end -->\n"


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_tools_endpoint(client: TestClient) -> None:
    response = client.get("/tools")
    assert response.status_code == 200
    assert "actdocs" in response.json()["tools"]


def test_migrate_endpoint(client: TestClient, doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": ACTDOCS_DOC, "plain.md": "# Plain\n"})

    response = client.post(
        "/migrate",
        json={
            "destinations": [str(doc_builder.path("README.md")), str(doc_builder.path("plain.md"))],
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "partial"
    assert [result["success"] for result in payload["results"]] == [True, False]
    assert doc_builder.read("README.md") == "<!-- inputs:start -->\n\n| a |\n\n<!-- inputs:end -->\n"


def test_migrate_endpoint_rejects_unknown_tool(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/migrate", json={"destinations": [str(tmp_path / "README.md")], "tool": "mkdocs"}
    )
    assert response.status_code == 400
    assert "Unknown migration tool" in response.json()["detail"]


def test_generate_endpoint_dry_run(client: TestClient, doc_builder: DocBuilder) -> None:
    doc_builder.write({"README.md": "# Action\n"})

    response = client.post(
        "/generate",
        json={
            "destinations": [str(doc_builder.path("README.md"))],
            "sections": {"usage": "See https://example.com"},
            "dry_run": True,
            "link_format": "full",
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert "+<!-- usage:start -->" in payload["results"][0]["data"]
    assert doc_builder.read("README.md") == "# Action\n"


def test_generate_endpoint_rejects_unknown_section(client: TestClient, tmp_path: Path) -> None:
    response = client.post(
        "/generate",
        json={"destinations": [str(tmp_path / "README.md")], "sections": {"bogus": "x"}},
    )
    assert response.status_code == 400
    assert "Unknown section 'bogus'" in response.json()["detail"]


def test_validation_errors_use_422(client: TestClient) -> None:
    response = client.post("/migrate", json={"destinations": []})
    assert response.status_code == 422
