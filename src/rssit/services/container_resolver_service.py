# src/rssit/services/container_resolver_service.py
from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import Tag

from rssit.dom.path_codec import get_relative_path
from rssit.model import ArticleContext, ElementWithPath, ParserSettings

logger = logging.getLogger(__name__)


class ContainerResolverService:
    """
    Finds the per-item container of every link of a cluster: the highest
    ancestor at which the items are still distinct siblings of one list.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()

    @staticmethod
    def find_containers(links: List[Tag]) -> List[Tag]:
        """
        Climbs all nodes one level at a time and stops as soon as the first two
        nodes share a parent. Assumes every link sits at the same depth below
        its container.
        """
        current = list(links)
        if len(current) < 2:
            return current
        while True:
            parents = [node.parent for node in current]
            # Identity, not equality: bs4 compares tags structurally.
            if parents[0] is parents[1]:
                break
            if any(parent is None for parent in parents):
                logger.debug("Container climb ran off the tree; links are nested unevenly.")
                break
            current = parents
        return current

    def find_article_contexts(self, cluster: List[ElementWithPath], root: Tag) -> List[ArticleContext]:
        """
        Wraps every link of the cluster with its container and the container's
        path below `root`. Returns an empty list when a container ends up
        outside of `root`, which only happens for unevenly nested links.
        """
        links = [item.element for item in cluster]
        containers = self.find_containers(links)
        contexts: List[ArticleContext] = []
        for link, container in zip(links, containers):
            try:
                path = get_relative_path(container, root, self.settings.with_class_names)
            except ValueError:
                logger.debug("Dropping cluster %r: container escaped the document root.", cluster[0].path)
                return []
            contexts.append(ArticleContext(link_element=link, context_element=container, context_element_path=path))
        return contexts
