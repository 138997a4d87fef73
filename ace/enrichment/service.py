"""
Participant enrichment.

Turns the orchestrator's raw profile/company hits into a single result:
a company name, a readable research summary and the profile link.
"""

import logging
from typing import List, Optional

from ace.enrichment.models import EnrichmentResult
from ace.people.domains import company_domain
from ace.people.normalizer import query_name_from
from ace.research.company import company_from_profile_title, extract_company_name
from ace.research.orchestrator import SearchOrchestrator
from ace.research.types import ResearchResult, ResearchSource
from ace.utils.cache import TTLCache

logger = logging.getLogger(__name__)


def _first(results: List[ResearchResult], source: ResearchSource) -> Optional[ResearchResult]:
    for result in results:
        if result.source == source:
            return result
    return None


def format_research_summary(results: List[ResearchResult]) -> Optional[str]:
    """
    Render company and profile hits as a multi-section summary.

    Args:
        results: Orchestrator output

    Returns:
        Summary text with a Company section and/or a LinkedIn section, or None
    """
    sections = []
    for source in (ResearchSource.COMPANY, ResearchSource.LINKEDIN):
        result = _first(results, source)
        if result is None:
            continue
        lines = [f"{source.value}: {result.title}"]
        if result.snippet:
            lines.append(result.snippet)
        lines.append(f"Source: {result.link}")
        sections.append("\n".join(lines))

    if not sections:
        return None
    return "\n\n".join(sections)


def derive_company_name(results: List[ResearchResult], name: str, email: str) -> Optional[str]:
    """
    Pick the participant's company name.

    Preference: company hit title, then the corporate domain, then the
    employer segment of the profile title.
    """
    domain = company_domain(email)

    company = _first(results, ResearchSource.COMPANY)
    if company is not None:
        extracted = extract_company_name(company.title, domain)
        if extracted:
            return extracted

    if domain:
        return domain

    profile = _first(results, ResearchSource.LINKEDIN)
    if profile is not None:
        return company_from_profile_title(profile.title, query_name_from(name))

    return None


class EnrichmentService:
    """
    Facade over the search orchestrator producing one EnrichmentResult per person.
    """

    def __init__(self, orchestrator: SearchOrchestrator, cache: Optional[TTLCache] = None):
        """
        Args:
            orchestrator: Search pipeline
            cache: Optional cross-call cache; None disables caching
        """
        self.orchestrator = orchestrator
        self.cache = cache

    def process_enrichment(self, name: str, email: str) -> EnrichmentResult:
        """
        Enrich a participant.

        Args:
            name: Display name (or the email when unknown)
            email: Participant email

        Returns:
            EnrichmentResult; all fields None when nothing was found
        """
        cache_key = f"enrich_{(name or '').strip().lower()}_{(email or '').strip().lower()}"
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {cache_key}")
                return cached

        results = self.orchestrator.enrich(name=name, email=email)
        profile = _first(results, ResearchSource.LINKEDIN)

        enriched = EnrichmentResult(
            company_name=derive_company_name(results, name, email or ""),
            research_summary=format_research_summary(results),
            linkedin_title=profile.title if profile else None,
            linkedin_url=profile.link if profile else None,
        )

        if self.cache is not None:
            self.cache.set(cache_key, enriched)

        return enriched

    def cleanup_expired(self) -> int:
        """Drop expired cache entries; returns the number removed (0 when caching is off)."""
        if self.cache is None:
            return 0
        return self.cache.cleanup_expired()


def create_enrichment_cache(ttl_minutes: int) -> Optional[TTLCache]:
    """Build the cross-cycle enrichment cache, or None when disabled (ttl 0)."""
    if ttl_minutes <= 0:
        return None
    return TTLCache(default_ttl_seconds=ttl_minutes * 60)
