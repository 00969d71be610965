# src/rssit/model.py (Inference Layer)
from __future__ import annotations

import logging
from typing import Any, List, Optional

from bs4 import Tag
from pydantic import BaseModel, ConfigDict, Field

from rssit.utils.config_manager import config_manager

logger = logging.getLogger(__name__)


class Article(BaseModel):
    """A single extracted record: trimmed title, raw href and description fragments."""
    title: str
    link: Optional[str] = None
    description: List[str] = Field(default_factory=list)


class ElementWithPath(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    element: Tag
    path: str


class ArticleContext(BaseModel):
    """
    One repeated item of a cluster. The elements are views into the caller's
    document tree, never copies.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    link_element: Tag
    context_element: Tag
    context_element_path: str


class FieldStats(BaseModel):
    variance: float = 0.0
    avg_word_count: float = 0.0


class TitleStats(FieldStats):
    text_node_path: str


class Stats(BaseModel):
    title: TitleStats
    description: Optional[FieldStats] = None


class StructureGroup(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    articles: List[ArticleContext]
    common_text_node_paths: List[str] = Field(default_factory=list)
    notcommon_text_node_paths: List[str] = Field(default_factory=list)
    structure_similarity: float = 0.0


class ArticleRule(StructureGroup):
    """
    A ranked extraction rule. Paths are structural addresses: `path` is relative
    to the document body, every other path relative to the container.

    The article contexts it was derived from are excluded from serialization,
    so a dumped rule can be edited and validated back for re-application.
    """
    articles: List[ArticleContext] = Field(default_factory=list, exclude=True)
    id: Optional[str] = None
    path: str
    link_path: str
    title_path: str
    stats: Stats
    score: float = 0.0


class SkippedItem(BaseModel):
    index: int
    reason: str


class ExtractionResult(BaseModel):
    articles: List[Article] = Field(default_factory=list)
    skipped: List[SkippedItem] = Field(default_factory=list)


class ParserSettings(BaseModel):
    """Thresholds of the inference engine."""
    min_link_words: int = 3
    min_cluster_size: int = 3
    min_title_words: int = 3
    min_description_length: int = 2
    with_class_names: bool = False

    @classmethod
    def from_config(cls, **overrides: Any) -> "ParserSettings":
        """Builds settings from the 'parser' section of settings.json, then applies overrides."""
        section = config_manager.get_nested("parser", {})
        if not isinstance(section, dict):
            logger.warning("Ignoring malformed 'parser' config section: %r", section)
            section = {}
        values = {k: v for k, v in section.items() if k in cls.model_fields}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
