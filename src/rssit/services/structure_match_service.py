# src/rssit/services/structure_match_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from rssit.dom.path_codec import select_one, text_node_paths
from rssit.model import ArticleContext, ParserSettings, StructureGroup

logger = logging.getLogger(__name__)


def uniq(items: List[str]) -> List[str]:
    """De-duplicates while keeping the first-seen order."""
    return list(dict.fromkeys(items))


@dataclass
class _PathPartition:
    common: List[str] = field(default_factory=list)
    not_common: List[str] = field(default_factory=list)


class StructureMatchService:
    """
    Compares the text leaves of a cluster's reference item against all other
    items and splits their paths into common and not-common ones.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()

    @staticmethod
    def exists_everywhere(path: str, articles: List[ArticleContext]) -> bool:
        # A text leaf directly inside the container has the empty path; it
        # counts as shared although it resolves to no element.
        if not path:
            return True
        return all(select_one(path, article.context_element) is not None for article in articles)

    def partition_paths(self, paths: List[str], articles: List[ArticleContext]) -> _PathPartition:
        partition = _PathPartition()
        for path in paths:
            if self.exists_everywhere(path, articles):
                partition.common.append(path)
            else:
                partition.not_common.append(path)
        return partition

    def find_common_text_nodes(self, articles: List[ArticleContext]) -> StructureGroup:
        reference = articles[0].context_element
        paths = text_node_paths(reference, self.settings.with_class_names)
        partition = self.partition_paths(paths, articles)

        # A not-common path below a common one is already covered by it.
        prefixes = [path for path in partition.common if path]
        not_common = [
            path for path in uniq(partition.not_common)
            if not any(path.startswith(prefix) for prefix in prefixes)
        ]
        similarity = len(partition.common) / len(paths) if paths else 0.0

        logger.debug(
            "Cluster %r: %d text leaves, %d common, similarity %.2f.",
            articles[0].context_element_path, len(paths), len(partition.common), similarity
        )
        return StructureGroup(
            articles=articles,
            common_text_node_paths=uniq(partition.common),
            notcommon_text_node_paths=not_common,
            structure_similarity=similarity,
        )
