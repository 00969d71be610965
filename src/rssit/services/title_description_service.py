# src/rssit/services/title_description_service.py
from __future__ import annotations

import logging
from typing import List, Optional

from rssit.dom.path_codec import get_relative_path, select_all, select_one, text_of
from rssit.model import ArticleRule, FieldStats, ParserSettings, Stats, StructureGroup, TitleStats
from rssit.services.link_cluster_service import to_words

logger = logging.getLogger(__name__)


def word_stats(words_per_article: List[List[str]]) -> FieldStats:
    """
    Word-level variance and average word count of a sample.

    The variance is the share of distinct words among all words: text that
    changes from item to item scores high, repeated boilerplate scores low.
    """
    words = [word for article_words in words_per_article for word in article_words]
    variance = len(set(words)) / max(len(words), 1)
    avg_word_count = len(words) / len(words_per_article) if words_per_article else 0.0
    return FieldStats(variance=variance, avg_word_count=avg_word_count)


class TitleDescriptionService:
    """
    Picks the title path of a structure group and aggregates the statistics of
    the remaining common text into the description figures.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()

    def title_candidates(self, group: StructureGroup) -> List[TitleStats]:
        """Common paths with enough words, most varying first."""
        candidates: List[TitleStats] = []
        for path in group.common_text_node_paths:
            words_per_article = [
                to_words(text_of(select_one(path, article.context_element)))
                for article in group.articles
            ]
            stats = word_stats(words_per_article)
            if stats.avg_word_count <= self.settings.min_title_words:
                continue
            candidates.append(TitleStats(text_node_path=path, **stats.model_dump()))
        # sorted() is stable: equal variances keep document order.
        return sorted(candidates, key=lambda c: c.variance, reverse=True)

    def find_title(self, group: StructureGroup) -> Optional[ArticleRule]:
        """
        Turns a structure group into a rule with a title, or returns None when
        no common path carries enough text to be a title.
        """
        candidates = self.title_candidates(group)
        if not candidates:
            logger.debug("No title candidate in group %r.", group.articles[0].context_element_path)
            return None

        title = candidates[0]
        reference = group.articles[0]
        return ArticleRule(
            articles=group.articles,
            structure_similarity=group.structure_similarity,
            path=reference.context_element_path,
            link_path=get_relative_path(
                reference.link_element, reference.context_element, self.settings.with_class_names
            ),
            title_path=title.text_node_path,
            common_text_node_paths=[p for p in group.common_text_node_paths if p != title.text_node_path],
            notcommon_text_node_paths=group.notcommon_text_node_paths,
            stats=Stats(title=title),
        )

    @staticmethod
    def find_description(rule: ArticleRule) -> ArticleRule:
        """Fills in `stats.description` over all remaining common paths at once."""
        words_per_article = []
        for article in rule.articles:
            words: List[str] = []
            for path in rule.common_text_node_paths:
                for element in select_all(path, article.context_element):
                    words.extend(to_words(element.get_text()))
            words_per_article.append(words)
        rule.stats.description = word_stats(words_per_article)
        return rule
