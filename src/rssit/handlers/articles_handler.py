# ============================================
# file: src/rssit/handlers/articles_handler.py
# ============================================
from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from rssit.controllers.feed_parser_controller import FeedParser
from rssit.handlers.rules_handler import assign_rule_ids, read_html
from rssit.model import ArticleRule, ParserSettings

logger = logging.getLogger(__name__)

articles_help_text = """
  articles <file.html> [--rule <rule.json> | --rule-id <ID>] [--with-classes]
      Extracts the articles of an HTML file and prints them as JSON.
      Uses the best inferred rule unless a rule file or a rule id is given.
""".strip()


def load_rule(path: str) -> ArticleRule:
    """Reads a rule as printed by 'rules'; a list of rules yields its first entry."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, list):
        if not data:
            raise ValueError(f"Rule file '{path}' contains no rules.")
        data = data[0]
    return ArticleRule.model_validate(data)


def pick_rule(parser: FeedParser, wanted_id: Optional[str]) -> Optional[ArticleRule]:
    rules = assign_rule_ids(parser.get_article_rules())
    if wanted_id is None:
        return rules[0] if rules else None
    for rule in rules:
        if rule.id == wanted_id:
            return rule
    raise LookupError(f"No rule with id '{wanted_id}' in this document.")


def handle_articles(args: List[str]) -> int:
    parser = argparse.ArgumentParser(prog="rssit articles", description="Extract articles from an HTML file.")
    parser.add_argument("file", metavar="FILE", help="HTML file to extract from.")
    g = parser.add_mutually_exclusive_group(required=False)
    g.add_argument("--rule", type=str, help="JSON file holding a rule printed by 'rules'.")
    g.add_argument("--rule-id", type=str, help="Id of an inferred rule to apply.")
    parser.add_argument("--with-classes", action="store_true", help="Include class names in element paths.")

    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    settings = ParserSettings.from_config(with_class_names=pargs.with_classes or None)

    try:
        feed_parser = FeedParser.from_html(read_html(pargs.file), settings)
        if pargs.rule:
            rule = load_rule(pargs.rule)
        else:
            rule = pick_rule(feed_parser, pargs.rule_id)
    except (OSError, ValueError, ValidationError) as e:
        # json.JSONDecodeError is a ValueError.
        logger.error("Could not prepare extraction: %s", e, exc_info=True)
        print(f"❌ Error: {e}")
        return 1
    except LookupError as e:
        print(f"❌ Error: {e}")
        return 1

    if rule is None:
        logger.info("No article rule found in %s.", pargs.file)
        articles = []
    else:
        result = feed_parser.extract(rule)
        if result.skipped:
            logger.info("Skipped %d items that did not match rule %s.", len(result.skipped), rule.id or rule.path)
        articles = result.articles

    print(json.dumps([a.model_dump() for a in articles], indent=2, ensure_ascii=False))
    return 0
