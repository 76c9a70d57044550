import textwrap
from typing import Iterable, Sequence, Tuple

import pytest

Entry = Tuple[str, Sequence[str]]


def render_feed(entries: Iterable[Entry]) -> str:
    """Build a pretty-printed RSS 2.0 document from (title, categories) pairs."""
    items = []
    for title, categories in entries:
        lines = ["    <item>", f"      <title>{title}</title>"]
        lines.append(f"      <link>https://example.com/{title.lower()}</link>")
        lines.extend(f"      <category>{label}</category>" for label in categories)
        lines.append("    </item>")
        items.append("\n".join(lines))

    body = "".join(f"\n{item}" for item in items)
    return textwrap.dedent(
        """\
        <?xml version="1.0" encoding="UTF-8"?>
        <rss version="2.0">
          <channel>
            <title>Example Blog</title>
            <link>https://example.com/</link>
            <description>Posts about statistics and code</description>"""
    ) + body + "\n  </channel>\n</rss>\n"


@pytest.fixture
def feed_file(tmp_path):
    """Return a factory writing a feed with the given entries to ``tmp_path``."""

    def _write(entries: Iterable[Entry], name: str = "rss.xml"):
        path = tmp_path / name
        path.write_text(render_feed(entries), encoding="utf-8")
        return path

    return _write
