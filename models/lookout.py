"""Data contracts for the Lookout research pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ResultType(str, Enum):
    VIDEO = "video"
    ARTICLE = "article"
    LINK = "link"


class PipelineStage(str, Enum):
    IDLE = "idle"
    GENERATING_QUERY = "generating_query"
    SEARCHING = "searching"
    RESULTS = "results"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineStage.RESULTS, PipelineStage.ERROR)


@dataclass(frozen=True)
class LookoutCommand:
    """Parsed chat input. ``is_command`` implies a non-empty ``question``."""

    is_command: bool
    question: str = ""
    highlighted_context: str | None = None


@dataclass(frozen=True)
class GeneratedQuery:
    """Search query produced for a question (AI-rewritten or the question itself)."""

    original_question: str
    search_query: str
    used_fallback: bool
    error: str | None = None


@dataclass(frozen=True)
class SearchResult:
    id: str
    type: ResultType
    title: str
    description: str
    url: str
    source: str
    thumbnail: str | None = None

    @property
    def is_video(self) -> bool:
        return self.type == ResultType.VIDEO

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "source": self.source,
        }
        if self.thumbnail:
            data["thumbnail"] = self.thumbnail
        return data


@dataclass(frozen=True)
class SearchOutcome:
    success: bool
    results: tuple[SearchResult, ...]
    search_query: str
    error: str | None = None
    fallback_used: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "results": [r.to_dict() for r in self.results],
            "searchQuery": self.search_query,
            "fallbackUsed": self.fallback_used,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class CacheEntry:
    outcome: SearchOutcome
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class PipelineState:
    """Snapshot of one pipeline invocation, handed to the presentation layer."""

    stage: PipelineStage = PipelineStage.IDLE
    command: LookoutCommand | None = None
    generated_query: GeneratedQuery | None = None
    outcome: SearchOutcome | None = None
    error: str | None = None
    suggested_actions: tuple[str, ...] = ()
    retry_count: int = 0

    @property
    def results(self) -> tuple[SearchResult, ...]:
        return self.outcome.results if self.outcome else ()
