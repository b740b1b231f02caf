"""HTML field extraction built from ordered structural heuristics.

Form notification templates are not under our control and have used several
label/value layouts over time. Each layout is recognized by one
``Heuristic``; ``extract_from_html`` runs them in priority order and merges
their results so that a field found by an earlier heuristic is never
overwritten by a later one.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from leadsync.core.models import FieldBag
from leadsync.extraction.patterns import resolve_field

logger = logging.getLogger(__name__)

LABEL_CLASS = "label"
INLINE_TAGS = ["span", "label", "td", "th", "dt", "dd"]
BOLD_TAGS = ["b", "strong"]


def parse_html(html: Optional[str]) -> BeautifulSoup:
    """Parse markup and drop the elements that never carry field values."""

    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(["script", "style"]):
        tag.decompose()
    return soup


def _text(element: Tag) -> str:
    return " ".join(element.get_text().split())


def _is_label_marked(element: Tag) -> bool:
    return LABEL_CLASS in (element.get("class") or [])


def _usable_value(element: Optional[Tag]) -> str:
    """Return the sibling's text when it can be a value, otherwise ``""``."""

    if element is None or _is_label_marked(element):
        return ""
    text = _text(element)
    if not text or text.endswith(":"):
        return ""
    return text


class Heuristic:
    """One way of pairing labels with values in a parsed document."""

    name = "heuristic"

    def pairs(self, soup: BeautifulSoup) -> Iterator[Tuple[str, str]]:
        raise NotImplementedError

    def scan(self, soup: BeautifulSoup) -> FieldBag:
        bag = FieldBag()
        for label, value in self.pairs(soup):
            key = resolve_field(label, value)
            if key is None:
                logger.debug("%s: ignoring unrecognized label %r", self.name, label)
                continue
            bag.fill(key, value)
        return bag


class LabeledElementHeuristic(Heuristic):
    """``<span class="label">Email:</span><span>value</span>``"""

    name = "labeled-element"

    def pairs(self, soup: BeautifulSoup) -> Iterator[Tuple[str, str]]:
        for element in soup.find_all(class_=LABEL_CLASS):
            label = _text(element).replace(":", "").strip()
            value = _usable_value(element.find_next_sibling())
            if label and value:
                yield label, value


class ColonSpanHeuristic(Heuristic):
    """Inline element ending in a colon followed by a sibling inline element."""

    name = "colon-span"

    def pairs(self, soup: BeautifulSoup) -> Iterator[Tuple[str, str]]:
        for element in soup.find_all(INLINE_TAGS):
            text = _text(element)
            if not text.endswith(":"):
                continue
            sibling = element.find_next_sibling()
            if sibling is None or sibling.name not in INLINE_TAGS:
                continue
            value = _usable_value(sibling)
            if value:
                yield text[:-1].strip(), value


class BoldPrefixHeuristic(Heuristic):
    """``<p><strong>Email:</strong> value</p>``: the value is the parent's own text."""

    name = "bold-prefix"

    def pairs(self, soup: BeautifulSoup) -> Iterator[Tuple[str, str]]:
        for element in soup.find_all(BOLD_TAGS):
            text = _text(element)
            if not text.endswith(":") or element.parent is None:
                continue
            own_text = "".join(
                child
                for child in element.parent.children
                if isinstance(child, NavigableString) and not isinstance(child, PreformattedString)
            )
            value = " ".join(own_text.split())
            if value:
                yield text[:-1].strip(), value


class TrailingTextHeuristic(Heuristic):
    """``<span>Email:</span> value``: a bare text node right after a colon-terminated element."""

    name = "trailing-text"

    def pairs(self, soup: BeautifulSoup) -> Iterator[Tuple[str, str]]:
        for element in soup.find_all(True):
            if element.find(True) is not None:
                continue
            text = _text(element)
            if not text.endswith(":") or ":" in text[:-1]:
                continue
            sibling = element.next_sibling
            if not isinstance(sibling, NavigableString) or isinstance(sibling, PreformattedString):
                continue
            value = " ".join(sibling.split())
            if value:
                yield text[:-1].strip(), value


DEFAULT_HEURISTICS: Sequence[Heuristic] = (
    LabeledElementHeuristic(),
    ColonSpanHeuristic(),
    BoldPrefixHeuristic(),
    TrailingTextHeuristic(),
)


def extract_from_html(html: Optional[str], heuristics: Iterable[Heuristic] = DEFAULT_HEURISTICS) -> FieldBag:
    """Extract canonical fields from an HTML body."""

    soup = parse_html(html)
    bag = FieldBag()
    for heuristic in heuristics:
        found = heuristic.scan(soup)
        before = len(bag)
        bag.merge(found)
        logger.debug(
            "%s found %d field(s), %d new",
            heuristic.name,
            len(found),
            len(bag) - before,
        )
    return bag
