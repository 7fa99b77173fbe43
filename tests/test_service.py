"""
Public operation surface: ingestion, retrieval, stats, export and reset.
"""

import pytest
from unittest.mock import patch

from ragmemory.agents.ollama_generator import OllamaGenerator
from ragmemory.core.errors import ProviderUnavailableFault, ValidationFault
from ragmemory.core.service import MemoryService, looks_like_serialized_error
from ragmemory.vector.embeddings import DeterministicHashEmbedding
from ragmemory.vector.store import InMemoryVectorStore, SQLiteVectorStore


def test_end_to_end_single_document(memory):
    """Empty store, one document, found again by a natural question."""
    assert memory.get_stats() == {"document_count": 0}

    result = memory.add_document("Company: Acme, Founder: Jane")

    assert result.status == "stored"
    assert result.length == len("Company: Acme, Founder: Jane")
    assert result.total_documents == 1
    assert memory.get_stats() == {"document_count": 1}
    assert memory.retrieve_top_k("Who founded Acme?", 1) == ["Company: Acme, Founder: Jane"]


@pytest.mark.parametrize("content", ["", "   ", "\n"])
def test_empty_document_rejected(memory, content):
    memory.add_document("existing")

    result = memory.add_document(content)

    assert result.status == "rejected"
    assert result.reason
    assert result.total_documents == 1
    assert memory.get_stats()["document_count"] == 1


@pytest.mark.parametrize("content", [
    '{"status": "error", "message": "Engine not initialized"}',
    '{"error": "TextEmbedder not initialized"}',
    "[object Object]",
])
def test_serialized_error_document_rejected(memory, content):
    result = memory.add_document(content)

    assert result.status == "rejected"
    assert memory.get_stats()["document_count"] == 0


def test_looks_like_serialized_error():
    assert looks_like_serialized_error('  {"error": null}  ')
    assert not looks_like_serialized_error('{"name": "Acme", "status": "active"}')
    assert not looks_like_serialized_error("{not json at all")
    assert not looks_like_serialized_error("The error was in the config")


def test_json_document_without_error_is_stored(memory):
    assert memory.add_document('{"name": "Acme", "founder": "Jane"}').status == "stored"


def test_retrieve_ranks_relevant_document_first(memory):
    memory.add_document("Paris is the capital of France")
    memory.add_document("Acme was founded by Jane in 1999")
    memory.add_document("Bananas are yellow and rich in potassium")

    results = memory.retrieve_top_k("Who founded Acme?", 3)

    assert len(results) == 3
    assert results[0] == "Acme was founded by Jane in 1999"


def test_retrieve_default_k_is_three(memory):
    for i in range(5):
        memory.add_document(f"document number {i}")

    assert len(memory.retrieve_top_k("document")) == 3


def test_retrieve_scored_exposes_components(memory):
    memory.add_document("Company: Acme, Founder: Jane")

    [result] = memory.retrieve_scored("acme", 1)

    assert result.lexical_boost == pytest.approx(0.05)
    assert result.final_score == pytest.approx(result.cosine_similarity + 0.05)
    assert -1.0 <= result.cosine_similarity <= 1.0


def test_retrieve_on_empty_store_returns_empty_list(memory):
    assert memory.retrieve_top_k("anything", 3) == []


def test_retrieve_rejects_empty_query(memory):
    with pytest.raises(ValidationFault):
        memory.retrieve_top_k("  ")


def test_clear_store(memory):
    memory.add_document("one")
    memory.add_document("two")

    assert memory.clear_store() == {"status": "success"}
    assert memory.clear_store() == {"status": "success"}
    assert memory.get_stats()["document_count"] == 0


def test_documents_persist_across_services(db_path, embedder, generator):
    first = MemoryService(SQLiteVectorStore(db_path), lambda: embedder, lambda: generator)
    first.add_document("Company: Acme, Founder: Jane")
    first.close()

    second = MemoryService(SQLiteVectorStore(db_path), lambda: embedder, lambda: generator)

    assert second.get_stats()["document_count"] == 1
    assert second.retrieve_top_k("Acme", 1) == ["Company: Acme, Founder: Jane"]


def test_export_memory(memory):
    memory.add_document("Company: Acme, Founder: Jane")
    memory.ask_with_memory("Who founded Acme?")

    snapshot = memory.export_memory()

    assert snapshot["long_term_doc_count"] == 1
    assert [turn["role"] for turn in snapshot["short_term"]] == ["user", "assistant"]
    assert snapshot["short_term"][0]["content"] == "Who founded Acme?"
    assert snapshot["short_term_token_count"] == memory.short_term.token_count()
    assert snapshot["short_term_token_count"] > 0


def test_export_memory_is_read_only(memory):
    memory.short_term.add("user", "hello")

    snapshot = memory.export_memory()
    snapshot["short_term"].clear()

    assert len(memory.short_term) == 1


def test_reset_all_memory(memory):
    memory.add_document("Company: Acme, Founder: Jane")
    memory.ask_with_short_term_only("hi")

    memory.reset_all_memory()

    assert len(memory.short_term) == 0
    assert memory.get_stats()["document_count"] == 0


def test_generate_text_uses_no_memory(memory, generator):
    memory.short_term.add("user", "earlier")

    outcome = memory.generate_text("Say hello")

    assert outcome.ok
    assert generator.last_prompt == "Say hello"
    assert len(memory.short_term) == 1


def test_generate_text_rejects_empty_prompt(memory):
    assert memory.generate_text("").fault == ValidationFault.code


def test_embed_probe(memory, embedder):
    probe = memory.embed_probe("Company: Acme")

    assert probe["length"] == embedder.get_dimension()
    assert len(probe["sample"]) == 5
    assert all(isinstance(value, float) for value in probe["sample"])


def test_add_document_reports_unavailable_embedder():
    def factory():
        raise ProviderUnavailableFault("embedder", "model missing")

    service = MemoryService(InMemoryVectorStore(), factory, lambda: None, max_retries=0)

    result = service.add_document("Company: Acme")

    assert result.status == "error"
    assert "model missing" in result.reason
    assert service.get_stats()["document_count"] == 0


def test_embedder_exception_is_retried_as_unavailable():
    """A crashing embedder is rebuilt and the call retried."""
    calls = []

    class FlakyEmbedding(DeterministicHashEmbedding):
        def embed_text(self, text):
            calls.append(text)
            if len(calls) == 1:
                raise RuntimeError("not ready")
            return super().embed_text(text)

    service = MemoryService(InMemoryVectorStore(), lambda: FlakyEmbedding(dimension=16), lambda: None)

    assert service.add_document("Company: Acme").status == "stored"
    assert len(calls) == 2
    assert service.embedder.init_count == 2


def test_health(memory):
    memory.add_document("Company: Acme")

    health = memory.health()

    assert health["status"] == "healthy"
    assert health["store_health"] is True
    assert health["document_count"] == 1
    assert health["embedder"]["ready"] is True
    assert health["generator"]["ready"] is False


def test_health_includes_engine_status(memory):
    memory.ask_with_short_term_only("hi")

    generator_status = memory.health()["generator"]

    assert generator_status["ready"] is True
    assert generator_status["generator_type"] == "MockGenerator"
    assert generator_status["model_name"] == "mock-model"
    assert generator_status["prompts_served"] == 1


@patch("ragmemory.agents.ollama_generator.ollama.Client")
def test_health_reports_ollama_availability(mock_client_class):
    mock_client_class.return_value.list.return_value = {"models": []}
    service = MemoryService(
        InMemoryVectorStore(),
        lambda: DeterministicHashEmbedding(dimension=16),
        lambda: OllamaGenerator("tiny-model"),
    )
    service.generator.get()

    generator_status = service.health()["generator"]

    assert generator_status["generator_type"] == "OllamaGenerator"
    assert generator_status["ollama_available"] is True
    mock_client_class.return_value.list.assert_called_once()
