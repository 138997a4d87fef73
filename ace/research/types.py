from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SearchHit:
    """One ranked web search result."""
    title: str
    snippet: str
    link: str


class ResearchSource(str, Enum):
    LINKEDIN = "LinkedIn"
    COMPANY = "Company"


@dataclass(frozen=True)
class ResearchResult:
    """A search hit the orchestrator kept, tagged with what it describes."""
    title: str
    snippet: str
    link: str
    source: ResearchSource

    @classmethod
    def from_hit(cls, hit: SearchHit, source: ResearchSource) -> "ResearchResult":
        return cls(title=hit.title, snippet=hit.snippet, link=hit.link, source=source)
