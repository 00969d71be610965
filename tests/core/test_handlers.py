# tests/core/test_handlers.py
import json

import pytest

from rssit import app
from rssit.handlers.rules_handler import rule_id
from rssit.utils.config_manager import config_manager

ITEMS = [
    ("Rust compiler gains faster incremental builds", "/r/1"),
    ("Gardeners report record tomato harvest season", "/r/2"),
    ("Orchestra announces surprise summer concert series", "/r/3"),
    ("Researchers map deep ocean trench floor", "/r/4"),
]


def page():
    items = "".join(
        f'<li><a href="{href}">{title}</a><small>Filed under misc topics today</small></li>'
        for title, href in ITEMS
    )
    return f"<html><body><ol>{items}</ol></body></html>"


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # Keep pytest's own log capture handlers in place.
    monkeypatch.setattr(app, "configure_logger", lambda *args, **kwargs: None)


@pytest.fixture(autouse=True)
def fresh_config():
    # --set overrides live in the shared ConfigManager.
    yield
    config_manager.reset()


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "index.html"
    path.write_text(page(), encoding="utf-8")
    return path


def run(capsys, *argv):
    code = app.main(list(argv))
    return code, capsys.readouterr().out


def test_no_arguments_prints_help(capsys):
    code, out = run(capsys)
    assert code == 0
    assert "rssit" in out and "articles" in out


def test_unknown_command(capsys):
    code, out = run(capsys, "bogus")
    assert code == 1
    assert "Unknown command: bogus" in out


def test_rules_command_prints_ranked_rules_with_ids(capsys, html_file):
    code, out = run(capsys, "rules", str(html_file))

    assert code == 0
    rules = json.loads(out)
    assert len(rules) == 1
    assert rules[0]["path"] == "OL>LI"
    assert rules[0]["title_path"] == "A"
    assert rules[0]["common_text_node_paths"] == ["SMALL"]
    assert len(rules[0]["id"]) == 12
    assert "articles" not in rules[0]


def test_rules_command_with_several_files(capsys, html_file, tmp_path):
    empty = tmp_path / "empty.html"
    empty.write_text("<html><body><p>Nothing here</p></body></html>", encoding="utf-8")

    code, out = run(capsys, "rules", str(html_file), str(empty))

    assert code == 0
    results = json.loads(out)
    assert results[str(empty)] == []
    assert len(results[str(html_file)]) == 1


def test_rules_command_missing_file(capsys, tmp_path):
    code, out = run(capsys, "rules", str(tmp_path / "missing.html"))
    assert code == 1
    assert "Could not read" in out


def test_rule_ids_are_stable(capsys, html_file):
    _, first = run(capsys, "rules", str(html_file))
    _, second = run(capsys, "rules", str(html_file))
    assert json.loads(first)[0]["id"] == json.loads(second)[0]["id"]


def test_articles_command_uses_best_rule(capsys, html_file):
    code, out = run(capsys, "articles", str(html_file))

    assert code == 0
    articles = json.loads(out)
    assert [(a["title"], a["link"]) for a in articles] == ITEMS
    assert articles[0]["description"] == ["Filed under misc topics today"]


def test_articles_command_with_rule_file(capsys, html_file, tmp_path):
    _, out = run(capsys, "rules", str(html_file))
    rule = json.loads(out)[0]
    rule["common_text_node_paths"] = []
    rule_file = tmp_path / "rule.json"
    rule_file.write_text(json.dumps(rule), encoding="utf-8")

    code, out = run(capsys, "articles", str(html_file), "--rule", str(rule_file))

    assert code == 0
    assert all(a["description"] == [] for a in json.loads(out))


def test_articles_command_with_rule_id(capsys, html_file):
    _, out = run(capsys, "rules", str(html_file))
    wanted = json.loads(out)[0]["id"]

    code, out = run(capsys, "articles", str(html_file), "--rule-id", wanted)
    assert code == 0
    assert len(json.loads(out)) == len(ITEMS)

    code, out = run(capsys, "articles", str(html_file), "--rule-id", "does-not-exist")
    assert code == 1
    assert "No rule with id" in out


def test_articles_command_with_invalid_rule_file(capsys, html_file, tmp_path):
    rule_file = tmp_path / "rule.json"
    rule_file.write_text(json.dumps({"path": "OL>LI"}), encoding="utf-8")

    code, out = run(capsys, "articles", str(html_file), "--rule", str(rule_file))
    assert code == 1
    assert out.startswith("❌ Error")


def test_articles_command_without_pattern_prints_empty_list(capsys, tmp_path):
    path = tmp_path / "plain.html"
    path.write_text("<html><body><p>Just a paragraph.</p></body></html>", encoding="utf-8")

    code, out = run(capsys, "articles", str(path))
    assert code == 0
    assert json.loads(out) == []


def test_rule_id_depends_on_paths():
    from rssit.model import ArticleRule, Stats, TitleStats

    def make(title_path):
        return ArticleRule(
            path="OL>LI", link_path="A", title_path=title_path,
            stats=Stats(title=TitleStats(text_node_path=title_path)),
        )

    assert rule_id(make("A")) == rule_id(make("A"))
    assert rule_id(make("A")) != rule_id(make("SMALL"))


@pytest.mark.parametrize("top", ["0", "-2"])
def test_rules_command_rejects_top_below_one(capsys, html_file, top):
    code, out = run(capsys, "rules", str(html_file), "--top", top)
    assert code == 1
    assert "--top must be at least 1" in out


def test_rules_command_top_limits_output(capsys, html_file):
    code, out = run(capsys, "rules", str(html_file), "--top", "1")
    assert code == 0
    assert len(json.loads(out)) == 1


def test_set_overrides_reach_the_engine(capsys, html_file):
    code, out = run(capsys, "--set", "parser.min_cluster_size=4", "rules", str(html_file))
    assert code == 0
    assert json.loads(out) == []

    code, out = run(capsys, "--set", "parser.with_class_names=true", "config")
    assert code == 0
    config = json.loads(out)
    assert config["parser"]["with_class_names"] is True
    assert config["parser"]["min_cluster_size"] == 4


def test_invalid_override_is_rejected(capsys):
    code, out = run(capsys, "--set", "no-equals-sign", "config")
    assert code == 1
    assert "Invalid override" in out


def test_config_command_takes_no_arguments(capsys):
    code, out = run(capsys, "config", "extra")
    assert code == 1
    assert "Unknown arguments: extra" in out
