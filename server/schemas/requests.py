"""Pydantic request models for FastAPI endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticCustomError

MAX_QUERY_CHARS = 500


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    prioritize_videos: bool = Field(False, alias="prioritizeVideos")

    @model_validator(mode="before")
    @classmethod
    def validate_body(cls, data: Any) -> Any:
        if not data or not isinstance(data, dict):
            raise PydanticCustomError("search_request", "Request body is required")

        query = data.get("query")
        if not isinstance(query, str) or not query.strip():
            raise PydanticCustomError(
                "search_request", "Query parameter is required and must be a non-empty string"
            )
        if len(query) > MAX_QUERY_CHARS:
            raise PydanticCustomError(
                "search_request", f"Query parameter is too long (max {MAX_QUERY_CHARS} characters)"
            )

        field = "prioritizeVideos" if "prioritizeVideos" in data else "prioritize_videos"
        prioritize_videos = data.get(field, False)
        if not isinstance(prioritize_videos, bool):
            raise PydanticCustomError("search_request", "prioritizeVideos parameter must be a boolean")

        return {"query": query.strip(), "prioritizeVideos": prioritize_videos}


class LookoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1, max_length=4000)
    highlighted_snippets: list[str] = Field(
        default_factory=list, alias="highlightedSnippets", max_length=20
    )
