from __future__ import annotations

import logging
from html.parser import HTMLParser
from pathlib import Path


logger = logging.getLogger(__name__)

SECTION_CLASS = "exercise"
SECTION_KEY_ATTR = "data-exercise"


class _SectionScanner(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.sections: list[tuple[str, str | None]] = []
        self._section_depth = 0
        self._current_key: str | None = None
        self._current_label: str | None = None
        self._in_heading = False
        self._heading_parts: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "section":
            if self._current_key is not None:
                self._section_depth += 1
                return
            attributes = {name: value or "" for name, value in attrs}
            classes = attributes.get("class", "").split()
            key = attributes.get(SECTION_KEY_ATTR, "").strip()
            if SECTION_CLASS in classes and key:
                self._current_key = key
                self._current_label = None
                self._section_depth = 1
            return
        if tag == "h2" and self._current_key is not None and self._current_label is None:
            self._in_heading = True
            self._heading_parts = []

    def handle_endtag(self, tag: str) -> None:
        if tag == "h2" and self._in_heading:
            self._in_heading = False
            text = " ".join("".join(self._heading_parts).split())
            self._current_label = text or None
            return
        if tag == "section" and self._current_key is not None:
            self._section_depth -= 1
            if self._section_depth <= 0:
                self.sections.append((self._current_key, self._current_label))
                self._current_key = None
                self._current_label = None
                self._section_depth = 0

    def handle_data(self, data: str) -> None:
        if self._in_heading:
            self._heading_parts.append(data)


class SectionIndex:
    """Exercise containers declared by the dashboard page, keyed by their ``data-exercise`` attribute."""

    def __init__(self, sections: list[tuple[str, str | None]] | None = None):
        self._labels: dict[str, str | None] = {}
        for key, label in sections or []:
            if key not in self._labels:
                self._labels[key] = label

    @classmethod
    def from_html(cls, html_text: str) -> "SectionIndex":
        scanner = _SectionScanner()
        scanner.feed(html_text)
        scanner.close()
        return cls(scanner.sections)

    @classmethod
    def from_file(cls, path: Path) -> "SectionIndex":
        try:
            html_text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return cls()
        except OSError as exc:
            logger.warning("Unable to read dashboard page %s: %s", path, exc)
            return cls()
        return cls.from_html(html_text)

    def keys(self) -> list[str]:
        return list(self._labels.keys())

    def label_for(self, key: str) -> str | None:
        return self._labels.get(key)

    def labels(self) -> dict[str, str | None]:
        return dict(self._labels)
