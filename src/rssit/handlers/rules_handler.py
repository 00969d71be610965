# ============================================
# file: src/rssit/handlers/rules_handler.py
# ============================================
from __future__ import annotations

import argparse
import hashlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from tqdm.auto import tqdm

from rssit.controllers.feed_parser_controller import FeedParser
from rssit.model import ArticleRule, ParserSettings

logger = logging.getLogger(__name__)

rules_help_text = """
  rules <file.html>... [--with-classes] [--top <N>]
      Infers the article rules of one or more HTML files and prints them as JSON,
      best rule first. Every rule carries a stable id usable with 'articles --rule-id'.
""".strip()


def rule_id(rule: ArticleRule) -> str:
    """Stable id of a rule, derived from its container, title and link paths."""
    key = "|".join((rule.path, rule.title_path, rule.link_path))
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def assign_rule_ids(rules: List[ArticleRule]) -> List[ArticleRule]:
    for rule in rules:
        if rule.id is None:
            rule.id = rule_id(rule)
    return rules


def read_html(path: str) -> str:
    return Path(path).read_text(encoding="utf-8", errors="replace")


def infer_rules(html: str, settings: ParserSettings) -> List[ArticleRule]:
    return assign_rule_ids(FeedParser.from_html(html, settings).get_article_rules())


def handle_rules(args: List[str]) -> int:
    parser = argparse.ArgumentParser(prog="rssit rules", description="Infer article rules from HTML files.")
    parser.add_argument("files", nargs="+", metavar="FILE", help="HTML file(s) to analyse.")
    parser.add_argument("--with-classes", action="store_true", help="Include class names in element paths.")
    parser.add_argument("--top", type=int, default=None, help="Only print the N best rules per file.")

    try:
        pargs = parser.parse_args(args)
    except SystemExit:
        return 1

    if pargs.top is not None and pargs.top < 1:
        print(f"❌ Error: --top must be at least 1, got {pargs.top}.")
        return 1

    settings = ParserSettings.from_config(with_class_names=pargs.with_classes or None)
    results: Dict[str, List[Dict[str, Any]]] = {}
    files = pargs.files if len(pargs.files) == 1 else tqdm(pargs.files, desc="Inferring rules", unit="file")

    for file in files:
        try:
            html = read_html(file)
        except OSError as e:
            logger.error("Could not read %s: %s", file, e, exc_info=True)
            print(f"❌ Error: Could not read '{file}'.")
            return 1
        rules = infer_rules(html, settings)
        if pargs.top is not None:
            rules = rules[:pargs.top]
        results[file] = [rule.model_dump(mode="json") for rule in rules]

    if len(results) == 1:
        print(json.dumps(next(iter(results.values())), indent=2, ensure_ascii=False))
    else:
        print(json.dumps(results, indent=2, ensure_ascii=False))
    return 0
