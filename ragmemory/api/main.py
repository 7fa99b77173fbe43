"""
HTTP surface for the RAG memory engine.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, Query, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .schemas import (
    DocumentRequest,
    DocumentResponse,
    SearchResult,
    SearchResponse,
    StatusResponse,
    StatsResponse,
    AskRequest,
    AskResponse,
    GenerateRequest,
    EmbedRequest,
    EmbedResponse,
    MemoryExportResponse,
    HealthResponse,
    ErrorResponse,
)
from ..core.assembler import AskOptions
from ..core.config import VERSION, DEFAULT_TOP_K, debug_enabled
from ..core.errors import (
    MemoryFault,
    ValidationFault,
    EmbeddingDimensionMismatch,
    ProviderUnavailableFault,
    GenerationFault,
)
from ..core.service import MemoryService
from ..util.logging import logger

FAULT_STATUS_CODES = {
    ValidationFault: 422,
    EmbeddingDimensionMismatch: 409,
    ProviderUnavailableFault: 503,
    GenerationFault: 502,
}


def get_memory(request: Request) -> MemoryService:
    """Dependency: the service installed on the application at startup."""
    return request.app.state.memory


def create_app(service: Optional[MemoryService] = None) -> FastAPI:
    """Build the API. Without a service, one is created from configuration at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.memory = service or MemoryService.from_config()
        logger.info(f"Memory API started (version {VERSION})")
        try:
            yield
        finally:
            app.state.memory.close()
            logger.info("Memory API stopped")

    app = FastAPI(
        title="RAG Memory API",
        version=VERSION,
        description="Embedding retrieval and dual-memory context assembly",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MemoryFault)
    async def memory_fault_handler(request: Request, exc: MemoryFault):
        status_code = next(
            (code for fault_type, code in FAULT_STATUS_CODES.items() if isinstance(exc, fault_type)),
            500
        )
        logger.log_operation(f"api.{request.url.path}", "fault", exc.to_dict())
        body = ErrorResponse(error_type=exc.code, message=exc.message, details=exc.details or None)
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint(memory: MemoryService = Depends(get_memory)):
        """Check system health."""
        return HealthResponse(**memory.health())

    @app.post("/documents", response_model=DocumentResponse)
    def add_document_endpoint(request: DocumentRequest, memory: MemoryService = Depends(get_memory)):
        """Store a document in long-term memory. Rejections are reported, not raised."""
        return DocumentResponse(**memory.add_document(request.content).to_dict())

    @app.get("/documents/search", response_model=SearchResponse)
    def search_documents_endpoint(
        query: str = Query(..., description="Search query text"),
        k: int = Query(DEFAULT_TOP_K, ge=1, le=100, description="Maximum number of results"),
        memory: MemoryService = Depends(get_memory),
    ):
        results = memory.retrieve_scored(query, k)
        return SearchResponse(
            query=query,
            k=k,
            results=[SearchResult(**result.to_dict()) for result in results],
        )

    @app.delete("/documents", response_model=StatusResponse)
    def clear_documents_endpoint(memory: MemoryService = Depends(get_memory)):
        return StatusResponse(**memory.clear_store())

    @app.get("/stats", response_model=StatsResponse)
    def stats_endpoint(memory: MemoryService = Depends(get_memory)):
        return StatsResponse(**memory.get_stats())

    @app.post("/ask", response_model=AskResponse)
    def ask_endpoint(request: AskRequest, memory: MemoryService = Depends(get_memory)):
        """Ask a question in one of the three memory modes."""
        options = AskOptions(**request.options.model_dump())
        outcome = memory.ask(request.question, request.mode, options)
        return AskResponse(**{k: v for k, v in outcome.to_dict().items() if k != "details"})

    @app.post("/generate", response_model=AskResponse)
    def generate_endpoint(request: GenerateRequest, memory: MemoryService = Depends(get_memory)):
        outcome = memory.generate_text(request.prompt)
        return AskResponse(**{k: v for k, v in outcome.to_dict().items() if k != "details"})

    @app.post("/embed", response_model=EmbedResponse)
    def embed_endpoint(request: EmbedRequest, memory: MemoryService = Depends(get_memory)):
        return EmbedResponse(**memory.embed_probe(request.text))

    @app.get("/memory/export", response_model=MemoryExportResponse)
    def export_memory_endpoint(memory: MemoryService = Depends(get_memory)):
        return MemoryExportResponse(**memory.export_memory())

    @app.post("/memory/reset", response_model=StatusResponse)
    def reset_memory_endpoint(memory: MemoryService = Depends(get_memory)):
        memory.reset_all_memory()
        return StatusResponse(status="success")

    return app
