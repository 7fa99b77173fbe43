#!/usr/bin/env python3
"""
Document ingestion utility.
Bulk-loads a text file into long-term memory, one document per paragraph or per line.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ragmemory.core.service import MemoryService


def split_documents(text: str, separator: str = "blank"):
    """Split raw text into candidate documents."""
    if separator == "line":
        chunks = text.splitlines()
    else:
        chunks = text.split("\n\n")
    return [chunk.strip() for chunk in chunks if chunk.strip()]


def main(argv=None):
    parser = argparse.ArgumentParser(description="Load documents into long-term memory")
    parser.add_argument("file", help="Text file to ingest")
    parser.add_argument("--separator", choices=["blank", "line"], default="blank",
                        help="Split on blank lines (paragraphs) or on every line")
    parser.add_argument("--db-path", help="Override DB_PATH")
    parser.add_argument("--clear", action="store_true", help="Clear the store before loading")
    args = parser.parse_args(argv)

    path = Path(args.file)
    if not path.exists():
        print(f"ERROR: File not found: {path}")
        return 1

    memory = MemoryService.from_config(args.db_path)
    try:
        if args.clear:
            memory.clear_store()
            print("✓ Cleared existing documents")

        documents = split_documents(path.read_text(encoding="utf-8"), args.separator)
        print(f"Found {len(documents)} documents in {path}")

        stored = rejected = 0
        for document in documents:
            result = memory.add_document(document)
            if result.status == "stored":
                stored += 1
            else:
                rejected += 1
                print(f"WARNING: Skipped document ({result.reason}): {document[:50]}")

        print(f"✓ Stored {stored} documents, {rejected} rejected")
        print(f"Total documents in store: {memory.get_stats()['document_count']}")
    finally:
        memory.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
