"""Tests for the HTTP API.

These tests verify:
- Upload, list and ask flow over an in-memory index
- Group chat and assistant endpoints
- Structured error bodies for domain failures
"""

import pytest
from fastapi.testclient import TestClient

from rag_workshop.api import create_app
from rag_workshop.api.dependencies import WorkshopServices
from rag_workshop.chat import NO_DOCUMENTS_ANSWER

from fakes import FailingCompleter, FailingEmbedder, HashingEmbedder, ScriptedCompleter, distinct_words


@pytest.fixture
def services(tmp_path, embedder, completer):
    return WorkshopServices.from_components(
        embedder=embedder,
        completer=completer,
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def upload(client, name, content):
    if isinstance(content, str):
        content = content.encode("utf-8")
    return client.post("/api/documents/upload", files={"file": (name, content, "text/plain")})


class TestDocuments:
    """Test upload, listing and question answering."""

    def test_upload_indexes_document(self, client, services):
        response = upload(client, "alpha.txt", distinct_words(1000))

        assert response.status_code == 200
        body = response.json()
        assert body["file_name"] == "alpha.txt"
        assert body["chunk_count"] == 3
        assert services.repository.index.count() == 3

    def test_upload_stores_file_under_generated_name(self, client, services):
        upload(client, "notes.md", "some markdown notes")

        stored = list(services.upload_dir.iterdir())
        assert len(stored) == 1
        assert stored[0].suffix == ".md"
        assert stored[0].name != "notes.md"
        assert stored[0].read_text() == "some markdown notes"

    def test_list_documents_in_upload_order(self, client):
        upload(client, "first.txt", "one two three")
        upload(client, "second.md", distinct_words(1000))

        response = client.get("/api/documents")

        assert response.status_code == 200
        documents = response.json()
        assert [d["file_name"] for d in documents] == ["first.txt", "second.md"]
        assert [d["chunk_count"] for d in documents] == [1, 3]
        assert all(d["file_path"] and d["uploaded_at"] for d in documents)

    def test_list_documents_empty(self, client):
        assert client.get("/api/documents").json() == []

    def test_ask_answers_from_documents(self, client, completer):
        upload(client, "alpha.txt", distinct_words(1000))

        response = client.post("/api/documents/ask", json={"question": "w5 w6"})

        assert response.status_code == 200
        body = response.json()
        assert body["question"] == "w5 w6"
        assert body["answer"] == "reply 1"
        assert body["sources"] == ["alpha.txt"]
        prompt, _ = completer.calls[0]
        assert "User question: w5 w6" in prompt

    def test_ask_without_documents(self, client, completer):
        response = client.post("/api/documents/ask", json={"question": "Anything?"})

        assert response.status_code == 200
        assert response.json()["answer"] == NO_DOCUMENTS_ANSWER
        assert response.json()["sources"] == []
        assert completer.calls == []

    def test_upload_rejects_unsupported_extension(self, client):
        response = upload(client, "report.pdf", b"%PDF-1.4")

        assert response.status_code == 400
        assert "Unsupported format" in response.json()["detail"]

    def test_upload_rejects_empty_file(self, client):
        response = upload(client, "empty.txt", b"")

        assert response.status_code == 400

    def test_upload_rejects_non_utf8(self, client, services):
        response = upload(client, "binary.txt", b"\xff\xfe\xfa\x00")

        assert response.status_code == 400
        assert "UTF-8" in response.json()["detail"]
        assert list(services.upload_dir.iterdir()) == []
        assert services.repository.list_documents() == []


class TestDocumentErrors:
    """Domain failures are returned as structured errors."""

    def test_ingestion_failure_returns_502(self, tmp_path, completer):
        services = WorkshopServices.from_components(
            embedder=FailingEmbedder(fail_after=1),
            completer=completer,
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))

        response = upload(client, "alpha.txt", distinct_words(1000))

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "INGESTION_FAILED"
        assert services.repository.index.count() == 1
        assert client.get("/api/documents").json() == []

    def test_transport_error_during_ingestion_returns_502(self, tmp_path, completer):
        services = WorkshopServices.from_components(
            embedder=FailingEmbedder(fail_after=0, error=ConnectionError("connection reset by peer")),
            completer=completer,
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))

        response = upload(client, "alpha.txt", "some text")

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "INGESTION_FAILED"

    def test_synthesis_failure_returns_502(self, tmp_path):
        services = WorkshopServices.from_components(
            embedder=HashingEmbedder(),
            completer=FailingCompleter(),
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))
        upload(client, "alpha.txt", "some indexed text")

        response = client.post("/api/documents/ask", json={"question": "indexed?"})

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "SYNTHESIS_FAILED"
        assert error["message"]

    def test_dimension_mismatch_returns_500(self, tmp_path, completer):
        services = WorkshopServices.from_components(
            embedder=HashingEmbedder(dimensions=16),
            completer=completer,
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))
        upload(client, "alpha.txt", "some indexed text")
        services.repository._embedder = HashingEmbedder(dimensions=32)

        response = client.post("/api/documents/ask", json={"question": "indexed?"})

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "DIMENSION_MISMATCH"


class TestGroupChat:
    """Test the group chat endpoint."""

    def test_default_budget(self, client):
        response = client.post("/api/groupchat", json={"message": "Build a todo API"})

        assert response.status_code == 200
        body = response.json()
        assert body["question"] == "Build a todo API"
        agents = [m["agent"] for m in body["conversation"]]
        assert agents == ["user", "Analyst", "Developer", "Reviewer", "Analyst", "Developer", "Reviewer"]
        assert body["final_response"] == "reply 6"

    def test_request_budget_overrides_default(self, client):
        response = client.post("/api/groupchat", json={"message": "Task", "max_turns": 2})

        assert len(response.json()["conversation"]) == 3

    @pytest.mark.parametrize("payload", [{"message": ""}, {"message": "Task", "max_turns": 0}])
    def test_invalid_requests_are_rejected(self, client, payload):
        assert client.post("/api/groupchat", json=payload).status_code == 422

    def test_turn_failure_returns_502(self, tmp_path):
        services = WorkshopServices.from_components(
            embedder=HashingEmbedder(),
            completer=FailingCompleter(),
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))

        response = client.post("/api/groupchat", json={"message": "Task"})

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "TURN_FAILED"


class TestAssistant:
    """Test the assistant endpoints."""

    def test_chat(self, client):
        response = client.post("/api/chat", json={"message": "What is RAG?"})

        assert response.status_code == 200
        assert response.json() == {"response": "reply 1"}

    def test_chat_with_history(self, client, completer):
        response = client.post(
            "/api/chat-with-history",
            json={
                "message": "And then?",
                "system_prompt": "You are terse.",
                "history": [{"role": "user", "content": "Hi"}, {"role": "assistant", "content": "Hello"}],
            },
        )

        assert response.status_code == 200
        prompt, instructions = completer.calls[0]
        assert prompt.startswith("Previous conversation:\n[user]: Hi\n[assistant]: Hello")
        assert instructions == "You are terse."

    def test_empty_reply_falls_back(self, tmp_path):
        services = WorkshopServices.from_components(
            embedder=HashingEmbedder(),
            completer=ScriptedCompleter(reply=lambda prompt, instructions: ""),
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))

        assert client.post("/api/chat", json={"message": "Hi"}).json()["response"] == "No answer available."

    def test_chat_failure_returns_502(self, tmp_path):
        services = WorkshopServices.from_components(
            embedder=HashingEmbedder(),
            completer=FailingCompleter(),
            upload_dir=str(tmp_path),
        )
        client = TestClient(create_app(services))

        response = client.post("/api/chat", json={"message": "Hi"})

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "COMPLETION_FAILED"


class TestInfo:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    def test_info_lists_endpoints(self, client):
        body = client.get("/api/info").json()

        assert any("/api/documents/upload" in endpoint for endpoint in body["endpoints"])
        assert any("/api/groupchat" in endpoint for endpoint in body["endpoints"])
        assert any("/.well-known/agent.json" in endpoint for endpoint in body["endpoints"])
