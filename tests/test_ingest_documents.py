"""
Bulk ingestion script.
"""

import pytest

from ragmemory.core import config
from ragmemory.core.service import MemoryService
from scripts.ingest_documents import main, split_documents


@pytest.fixture(autouse=True)
def offline_providers(monkeypatch):
    monkeypatch.setattr(config, "EMBED_PROVIDER", "hash")
    monkeypatch.setattr(config, "GENERATOR_PROVIDER", "mock")


def test_split_on_blank_lines():
    text = "First paragraph\nstill first\n\nSecond\n\n\n  \n\nThird"

    assert split_documents(text) == ["First paragraph\nstill first", "Second", "Third"]


def test_split_on_lines():
    assert split_documents("one\n\ntwo\n three \n", "line") == ["one", "two", "three"]


def test_ingest_file(tmp_path, capsys):
    source = tmp_path / "facts.txt"
    source.write_text("Company: Acme, Founder: Jane\n\n[object Object]\n\nBananas are yellow\n")
    db_path = str(tmp_path / "rag.db")

    assert main([str(source), "--db-path", db_path]) == 0

    output = capsys.readouterr().out
    assert "Stored 2 documents, 1 rejected" in output

    memory = MemoryService.from_config(db_path)
    assert memory.get_stats() == {"document_count": 2}
    memory.close()


def test_ingest_with_clear(tmp_path):
    source = tmp_path / "facts.txt"
    source.write_text("alpha\nbeta\n")
    db_path = str(tmp_path / "rag.db")

    main([str(source), "--db-path", db_path, "--separator", "line"])
    main([str(source), "--db-path", db_path, "--separator", "line", "--clear"])

    memory = MemoryService.from_config(db_path)
    assert memory.get_stats() == {"document_count": 2}
    memory.close()


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert "File not found" in capsys.readouterr().out
