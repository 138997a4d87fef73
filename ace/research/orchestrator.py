"""
Participant search orchestration.

Resolves a person to a validated profile hit and a company hit using the
configured search provider:

    company pre-search -> profile search -> domain fallback -> company search

Every stage tolerates a failed search; the worst case is an empty result.
"""

import logging
from typing import List, Optional

from ace.people.domains import company_domain
from ace.people.normalizer import query_name_from
from ace.people.validator import validate_profile_match
from ace.research.company import company_from_profile_title, extract_company_name
from ace.research.provider import SearchProvider
from ace.research.types import ResearchResult, ResearchSource, SearchHit

logger = logging.getLogger(__name__)

PROFILE_LINK_MARKER = "linkedin.com/in/"
MIN_DOMAIN_BASE_CHARS = 3


def profile_query(query_name: str, context: str) -> str:
    if context:
        return f"{query_name} {context} linkedin"
    return f"{query_name} linkedin"


def capitalized_domain_base(domain: str) -> str:
    """'madrona.com' -> 'Madrona'"""
    return domain.split(".")[0].capitalize()


class SearchOrchestrator:
    """
    Finds a person's profile and company context with a multi-stage search.
    """

    def __init__(self, search_provider: SearchProvider):
        self.search_provider = search_provider

    def _search(self, query: str) -> List[SearchHit]:
        return self.search_provider.search(query) or []

    def _resolve_context(self, company_hint: Optional[str], domain: str) -> str:
        """
        Pick the string used to disambiguate the person in queries.

        Args:
            company_hint: Caller-supplied company name, if any
            domain: Corporate email domain, or ""

        Returns:
            Company name, capitalized domain base, domain, or ""
        """
        context = company_hint or domain

        if company_hint is None and domain:
            logger.debug(f"Searching for company using domain '{domain}'")
            hits = self._search(domain)
            if hits:
                extracted = extract_company_name(hits[0].title, domain)
                if extracted:
                    logger.debug(f"Extracted company name '{extracted}' from '{hits[0].title}'")
                    context = extracted

        if domain and context == domain:
            base = capitalized_domain_base(domain)
            if len(base) >= MIN_DOMAIN_BASE_CHARS:
                context = base

        return context

    def _find_profile(self, query: str, query_name: str, context: str) -> Optional[SearchHit]:
        """Run a profile query and return the first hit that validates."""
        logger.info(f"Profile search: '{query}'")
        profiles = [hit for hit in self._search(query) if PROFILE_LINK_MARKER in hit.link]

        for hit in profiles:
            decision = validate_profile_match(query_name, context, hit)
            if decision.accepted:
                logger.info(f"Profile matched: '{hit.title}' ({decision.reason})")
                return hit
            logger.info(f"Profile rejected: '{hit.title[:40]}' - {decision.reason}")

        return None

    def enrich(
        self,
        name: str,
        company_hint: Optional[str] = None,
        email: Optional[str] = None,
    ) -> List[ResearchResult]:
        """
        Resolve a person into profile and company search results.

        Args:
            name: Display name, or an email address when no name is known
            company_hint: Known company name; skips the domain pre-search
            email: Email used to derive a corporate domain

        Returns:
            Up to two results: the LinkedIn profile first, then the company
        """
        query_name = query_name_from(name)
        domain = company_domain(email or "")
        hint = (company_hint or "").strip() or None

        context = self._resolve_context(hint, domain)

        profile = self._find_profile(profile_query(query_name, context), query_name, context)

        if profile is None and domain and domain.lower() not in context.lower():
            logger.info(f"Initial profile search failed; retrying with domain '{domain}'")
            profile = self._find_profile(profile_query(query_name, domain), query_name, domain)

        results: List[ResearchResult] = []
        if profile is not None:
            results.append(ResearchResult.from_hit(profile, ResearchSource.LINKEDIN))
        else:
            logger.info(f"No valid profile found for '{query_name}'")

        company_query = context
        if not company_query and profile is not None:
            company_query = company_from_profile_title(profile.title, query_name) or ""
            if company_query:
                logger.info(f"Company discovered from profile title: '{company_query}'")

        if company_query:
            hits = self._search(company_query)
            if hits:
                results.append(ResearchResult.from_hit(hits[0], ResearchSource.COMPANY))

        return results
