# src/rssit/services/rule_rank_service.py
from __future__ import annotations

import logging
from typing import List

from rssit.model import ArticleRule, FieldStats

logger = logging.getLogger(__name__)


class RuleRankService:
    """Scores rules and orders them best first."""

    @staticmethod
    def score(rule: ArticleRule) -> float:
        title = rule.stats.title
        description = rule.stats.description or FieldStats()
        return title.variance * title.avg_word_count + description.variance * description.avg_word_count

    def rank(self, rules: List[ArticleRule]) -> List[ArticleRule]:
        for rule in rules:
            rule.score = self.score(rule)
        ranked = sorted(rules, key=lambda r: r.score, reverse=True)
        if ranked:
            logger.debug("Best rule %r scored %.3f out of %d.", ranked[0].path, ranked[0].score, len(ranked))
        return ranked
