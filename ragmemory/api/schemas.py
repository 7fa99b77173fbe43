"""
Request and response models for the memory API.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from ..core.assembler import MemoryMode
from ..core.config import MAX_TOKENS_SHORT_TERM, MAX_TOKENS_LONG_TERM, DEFAULT_TOP_K


class DocumentRequest(BaseModel):
    content: str


class DocumentResponse(BaseModel):
    status: str  # stored|rejected|error
    length: int
    total_documents: int
    reason: Optional[str] = None


class SearchResult(BaseModel):
    document_id: int
    content: str
    cosine_similarity: float
    lexical_boost: float
    final_score: float


class SearchResponse(BaseModel):
    query: str
    k: int = DEFAULT_TOP_K
    results: List[SearchResult]


class StatusResponse(BaseModel):
    status: str


class StatsResponse(BaseModel):
    document_count: int


class AskOptionsModel(BaseModel):
    max_short_term_tokens: int = Field(MAX_TOKENS_SHORT_TERM, ge=0)
    max_long_term_tokens: int = Field(MAX_TOKENS_LONG_TERM, ge=0)
    system_prompt: Optional[str] = None


class AskRequest(BaseModel):
    question: str
    mode: MemoryMode = MemoryMode.BOTH
    options: AskOptionsModel = Field(default_factory=AskOptionsModel)

    @field_validator('question')
    @classmethod
    def question_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('question cannot be empty')
        return v


class GenerateRequest(BaseModel):
    prompt: str


class AskResponse(BaseModel):
    status: str  # success|error
    mode: Optional[str] = None
    response: Optional[str] = None
    fault: Optional[str] = None
    message: Optional[str] = None
    context_used: Optional[str] = None
    best_score: Optional[float] = None
    prompt_length: int = 0


class EmbedRequest(BaseModel):
    text: str


class EmbedResponse(BaseModel):
    length: int
    sample: List[float]


class MemoryTurnModel(BaseModel):
    role: str
    content: str


class MemoryExportResponse(BaseModel):
    short_term: List[MemoryTurnModel]
    short_term_token_count: int
    long_term_doc_count: int


class HealthResponse(BaseModel):
    status: str
    version: str
    store_health: bool
    document_count: int
    embedder: Dict[str, Any]
    generator: Dict[str, Any]


class ErrorResponse(BaseModel):
    error_type: str
    message: str
    timestamp: datetime = None
    details: Optional[Dict[str, Any]] = None

    def __init__(self, **data):
        super().__init__(timestamp=datetime.now(), **data)
