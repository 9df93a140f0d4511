"""Pydantic models for story ingestion."""
from pydantic import BaseModel, Field, field_validator
from typing import Dict, Any, Optional

import config


class StoryDocument(BaseModel):
    """A story loaded from disk, ready for analysis."""
    title: str
    text: str
    source_format: str  # txt | md | fountain | pdf
    metadata: Dict[str, Any] = Field(default_factory=dict)


class StoryInput(BaseModel):
    """Raw story text plus the identifiers it should be analyzed against."""
    story_text: str
    story_title: str = "Untitled"
    story_world_id: Optional[str] = None
    story_id: Optional[str] = None

    @field_validator("story_text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("story_text must be a non-empty string")
        return value


class ExtractionOptions(BaseModel):
    """Stage toggles for a single extraction run."""
    extract_characters: bool = True
    extract_locations: bool = True
    extract_items: bool = True
    extract_plotlines: bool = True
    extract_scenes: bool = True
    extract_events: bool = True
    extract_relationships: bool = True
    extract_dependencies: bool = True
    extract_arcs: bool = True
    confidence_threshold: float = Field(default=config.CONFIDENCE_THRESHOLD, ge=0.0, le=1.0)
    enrich: bool = False
