# src/rssit/services/rule_apply_service.py
from __future__ import annotations

import logging
from typing import List, Optional, Union

from bs4 import Tag

from rssit.dom.path_codec import select_all, select_one
from rssit.model import Article, ArticleRule, ExtractionResult, ParserSettings, SkippedItem

logger = logging.getLogger(__name__)


class RuleApplyService:
    """
    Re-runs a rule's paths against a whole document. Items whose title or
    link cannot be resolved are reported as skipped; they never abort the run.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()

    @staticmethod
    def _resolve_link(element: Tag, link_path: str) -> Optional[Tag]:
        # Links that are their own container have the empty link path.
        if not link_path:
            return element
        return select_one(link_path, element)

    def extract_description(self, element: Tag, paths: List[str]) -> List[str]:
        fragments: List[str] = []
        for path in paths:
            for match in select_all(path, element):
                text = match.get_text().strip()
                if len(text) > self.settings.min_description_length:
                    fragments.append(text)
        return fragments

    def extract_one(self, element: Tag, rule: ArticleRule) -> Union[Article, str]:
        """Returns the record of one container, or the reason it was skipped."""
        title = select_one(rule.title_path, element)
        if title is None:
            return f"title path {rule.title_path!r} not found"
        link = self._resolve_link(element, rule.link_path)
        if link is None:
            return f"link path {rule.link_path!r} not found"
        return Article(
            title=title.get_text().strip(),
            link=link.get("href"),
            description=self.extract_description(element, rule.common_text_node_paths),
        )

    def apply(self, soup: Tag, rule: ArticleRule) -> ExtractionResult:
        result = ExtractionResult()
        for index, element in enumerate(select_all(rule.path, soup)):
            outcome = self.extract_one(element, rule)
            if isinstance(outcome, Article):
                result.articles.append(outcome)
            else:
                logger.debug("Skipping item %d of rule %r: %s", index, rule.path, outcome)
                result.skipped.append(SkippedItem(index=index, reason=outcome))
        logger.debug(
            "Rule %r extracted %d articles, skipped %d.",
            rule.path, len(result.articles), len(result.skipped)
        )
        return result
