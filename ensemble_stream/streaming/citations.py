"""Citation tracking: numbered inline markers and a references footnote."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config.constants import REFERENCES_HEADING


@dataclass
class Citation:
    index: int
    url: str
    title: str


class CitationTracker:
    """Assigns citation numbers in first-seen order, one per distinct URL."""

    def __init__(self):
        self._citations: Dict[str, Citation] = {}

    def __len__(self) -> int:
        return len(self._citations)

    @property
    def citations(self) -> List[Citation]:
        return list(self._citations.values())

    def add(self, url: str, title: Optional[str] = None) -> int:
        """Register a source and return its 1-based index."""
        citation = self._citations.get(url)
        if citation is None:
            citation = Citation(index=len(self._citations) + 1, url=url, title=title or url)
            self._citations[url] = citation
        return citation.index

    def marker(self, url: str, title: Optional[str] = None) -> str:
        """Inline marker for ``url``, e.g. ``" [1]"``."""
        return f" [{self.add(url, title)}]"

    def footnotes(self) -> str:
        """Rendered references block, or an empty string when nothing was cited."""
        if not self._citations:
            return ""
        lines = [f"[{c.index}] {c.title} – {c.url}" for c in self._citations.values()]
        return f"\n\n{REFERENCES_HEADING}\n" + "\n".join(lines)

    def clear(self) -> None:
        self._citations.clear()
