# src/rssit/services/link_cluster_service.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from bs4 import Tag

from rssit.dom.path_codec import get_relative_path
from rssit.model import ElementWithPath, ParserSettings

logger = logging.getLogger(__name__)


def to_words(text: Optional[str]) -> List[str]:
    """Whitespace-split words of a text, blanks dropped."""
    if not text:
        return []
    return text.split()


def find_links(soup: Tag) -> List[Tag]:
    """All anchors of the document, in document order."""
    return soup.find_all("a")


class LinkClusterService:
    """
    Finds the repeated article links of a document: anchors with enough link
    text, grouped by identical path below the document root.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()

    def find_candidate_links(self, soup: Tag, root: Tag) -> List[ElementWithPath]:
        """Anchors whose text has more than `min_link_words` words, with their path."""
        candidates: List[ElementWithPath] = []
        for element in find_links(soup):
            if len(to_words(element.get_text())) <= self.settings.min_link_words:
                continue
            try:
                path = get_relative_path(element, root, self.settings.with_class_names)
            except ValueError:
                # Anchor outside of <body>, e.g. inside <head> noise.
                logger.debug("Skipping link outside of the document root: %r", element.get("href"))
                continue
            candidates.append(ElementWithPath(element=element, path=path))
        return candidates

    @staticmethod
    def group_by_path(links: List[ElementWithPath]) -> Dict[str, List[ElementWithPath]]:
        groups: Dict[str, List[ElementWithPath]] = {}
        for link in links:
            groups.setdefault(link.path, []).append(link)
        return groups

    def find_clusters(self, soup: Tag, root: Tag) -> List[List[ElementWithPath]]:
        """
        Groups candidate links by path and keeps the groups with more than
        `min_cluster_size` members, in order of first appearance.
        """
        groups = self.group_by_path(self.find_candidate_links(soup, root))
        clusters = [links for links in groups.values() if len(links) > self.settings.min_cluster_size]
        logger.debug(
            "Found %d link groups, %d of them repeat more than %d times.",
            len(groups), len(clusters), self.settings.min_cluster_size
        )
        return clusters
