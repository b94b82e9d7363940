"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from models.lookout import GeneratedQuery, PipelineState, SearchOutcome, SearchResult


class SearchResultDTO(BaseModel):
    id: str
    type: str
    title: str
    description: str
    url: str
    source: str
    thumbnail: str | None = None

    @classmethod
    def from_result(cls, result: SearchResult):
        return cls(
            id=result.id,
            type=result.type.value,
            title=result.title,
            description=result.description,
            url=result.url,
            source=result.source,
            thumbnail=result.thumbnail,
        )


class SearchResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    results: list[SearchResultDTO] = Field(default_factory=list)
    search_query: str = Field("", alias="searchQuery")
    error: str | None = None
    fallback_used: bool = Field(False, alias="fallbackUsed")

    @classmethod
    def from_outcome(cls, outcome: SearchOutcome):
        """Convert SearchOutcome to DTO."""
        return cls(
            success=outcome.success,
            results=[SearchResultDTO.from_result(r) for r in outcome.results],
            search_query=outcome.search_query,
            error=outcome.error,
            fallback_used=outcome.fallback_used,
        )


class GeneratedQueryDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_question: str = Field(..., alias="originalQuestion")
    search_query: str = Field(..., alias="searchQuery")
    used_fallback: bool = Field(..., alias="usedFallback")
    error: str | None = None

    @classmethod
    def from_generated(cls, generated: GeneratedQuery):
        return cls(
            original_question=generated.original_question,
            search_query=generated.search_query,
            used_fallback=generated.used_fallback,
            error=generated.error,
        )


class LookoutResponseDTO(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_command: bool = Field(..., alias="isCommand")
    stage: str | None = None
    question: str | None = None
    generated_query: GeneratedQueryDTO | None = Field(None, alias="generatedQuery")
    outcome: SearchResponseDTO | None = None
    error: str | None = None
    suggested_actions: list[str] = Field(default_factory=list, alias="suggestedActions")

    @classmethod
    def not_a_command(cls):
        return cls(is_command=False)

    @classmethod
    def from_state(cls, state: PipelineState):
        """Convert a terminal PipelineState to DTO."""
        return cls(
            is_command=True,
            stage=state.stage.value,
            question=state.command.question if state.command else None,
            generated_query=(
                GeneratedQueryDTO.from_generated(state.generated_query)
                if state.generated_query
                else None
            ),
            outcome=SearchResponseDTO.from_outcome(state.outcome) if state.outcome else None,
            error=state.error,
            suggested_actions=list(state.suggested_actions),
        )


class CacheStatsDTO(BaseModel):
    entries: int
    max_entries: int | None = None
    hits: int
    misses: int


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
    cache: CacheStatsDTO | None = None
