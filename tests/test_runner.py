import json
import logging

import pytest

from feed_sieve.models import FilterResult
from feed_sieve.runner import RunConfig, execute
import feed_sieve.runner as runner


def test_execute_writes_filtered_feed_and_reports(feed_file, tmp_path):
    source = feed_file([("A", ["R", "code"]), ("B", ["Python"]), ("C", ["R"])])
    output = tmp_path / "r-rss.xml"

    result = execute(
        RunConfig(input_path=str(source), output_path=str(output), category="R")
    )
    report = json.loads(result.output_text)

    assert output.exists()
    assert report == {
        "input": str(source),
        "output": str(output),
        "category": "R",
        "total": 3,
        "kept": 2,
        "titles": ["A", "C"],
    }
    assert result.result.kept_entries == 2


def test_execute_dry_run_does_not_write(feed_file, tmp_path):
    source = feed_file([("A", ["R"]), ("B", ["Python"])])
    output = tmp_path / "r-rss.xml"

    result = execute(
        RunConfig(
            input_path=str(source),
            output_path=str(output),
            category="Python",
            dry_run=True,
        )
    )
    report = json.loads(result.output_text)

    assert not output.exists()
    assert report["output"] is None
    assert report["titles"] == ["B"]


def test_execute_passes_paths_through(monkeypatch):
    captured = {}

    def fake_filter_feed(input_path, output_path, category, **kwargs):
        captured.update(kwargs, input=input_path, output=output_path, category=category)
        return FilterResult(input_path, output_path, category, 0, 0)

    monkeypatch.setattr(runner, "filter_feed", fake_filter_feed)

    execute(
        RunConfig(
            input_path="in.xml",
            output_path="out.xml",
            category="R",
            entry_path="channel/item",
            category_path="category/@term",
        )
    )

    assert captured == {
        "input": "in.xml",
        "output": "out.xml",
        "category": "R",
        "entry_path": "channel/item",
        "category_path": "category/@term",
    }


def test_execute_warns_when_nothing_matches(feed_file, tmp_path, caplog):
    source = feed_file([("A", ["Python"])])
    output = tmp_path / "r-rss.xml"

    with caplog.at_level(logging.WARNING, logger="feed_sieve.runner"):
        result = execute(
            RunConfig(input_path=str(source), output_path=str(output), category="R")
        )

    assert result.result.kept_entries == 0
    assert output.exists()
    assert "No entries" in caplog.text


def test_execute_rejects_empty_category(tmp_path):
    with pytest.raises(ValueError):
        execute(
            RunConfig(
                input_path=str(tmp_path / "rss.xml"),
                output_path=str(tmp_path / "r-rss.xml"),
                category="",
            )
        )


def test_execute_dry_run_rejects_empty_category(feed_file, monkeypatch):
    source = feed_file([("A", ["R"])])
    monkeypatch.setattr(
        runner, "read_feed", lambda path: pytest.fail("feed should not be read")
    )

    with pytest.raises(ValueError):
        execute(
            RunConfig(
                input_path=str(source),
                output_path="unused.xml",
                category="",
                dry_run=True,
            )
        )
