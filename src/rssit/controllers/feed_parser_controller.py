# src/rssit/controllers/feed_parser_controller.py
from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import Tag

from rssit.dom.builder import DocumentBuilder
from rssit.model import Article, ArticleRule, ExtractionResult, ParserSettings
from rssit.services.container_resolver_service import ContainerResolverService
from rssit.services.link_cluster_service import LinkClusterService
from rssit.services.rule_apply_service import RuleApplyService
from rssit.services.rule_rank_service import RuleRankService
from rssit.services.structure_match_service import StructureMatchService
from rssit.services.title_description_service import TitleDescriptionService

logger = logging.getLogger(__name__)


class FeedParser:
    """
    Infers the repeated article block of a document and extracts articles
    from it.

    The document is only read, never modified, and the parser keeps no state
    between calls: every call of `get_article_rules` runs the full inference.
    """

    def __init__(self, document: Tag, settings: Optional[ParserSettings] = None) -> None:
        self.document = document
        self.settings = settings or ParserSettings.from_config()
        self.link_clusters = LinkClusterService(self.settings)
        self.containers = ContainerResolverService(self.settings)
        self.structures = StructureMatchService(self.settings)
        self.titles = TitleDescriptionService(self.settings)
        self.ranker = RuleRankService()
        self.applier = RuleApplyService(self.settings)

    @classmethod
    def from_html(cls, html: str, settings: Optional[ParserSettings] = None) -> "FeedParser":
        return cls(DocumentBuilder.parse_doc(html), settings)

    def get_document_root(self) -> Tag:
        return DocumentBuilder.get_root(self.document)

    def get_article_rules(self) -> List[ArticleRule]:
        """
        Runs the inference: link clusters, their containers, the common
        structure of each cluster, title and description, then the ranking.

        Returns:
            List[ArticleRule]: Rules ordered best first; empty if the document
                               shows no repeated article block.
        """
        root = self.get_document_root()
        rules: List[ArticleRule] = []
        for cluster in self.link_clusters.find_clusters(self.document, root):
            articles = self.containers.find_article_contexts(cluster, root)
            if not articles:
                continue
            group = self.structures.find_common_text_nodes(articles)
            rule = self.titles.find_title(group)
            if rule is None:
                continue
            rules.append(self.titles.find_description(rule))

        ranked = self.ranker.rank(rules)
        logger.info("Inferred %d article rules.", len(ranked))
        return ranked

    def get_articles(self) -> List[Article]:
        """Applies the best inferred rule; empty when there is none."""
        rules = self.get_article_rules()
        if not rules:
            return []
        return self.get_article(rules[0])

    def get_article(self, rule: ArticleRule) -> List[Article]:
        return self.extract(rule).articles

    def extract(self, rule: ArticleRule) -> ExtractionResult:
        """Like `get_article`, but also reports the skipped items."""
        return self.applier.apply(self.document, rule)
