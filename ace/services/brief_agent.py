"""
Meeting brief generation.

Resolves and enriches a meeting's participants, renders the brief prompt and
asks the LLM for a short pre-meeting brief. Every collaborator failure
degrades: an unresolved name keeps the email, a failed enrichment leaves the
participant without research, and a failed completion yields a generic brief.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ace.calendar.types import Meeting
from ace.enrichment.models import EnrichmentResult
from ace.enrichment.service import EnrichmentService
from ace.llm.service import LLMClient, LLMError
from ace.observability.logger import log_error, timing
from ace.people.domains import looks_like_email
from ace.people.lookup import PeopleLookup
from ace.rendering.prompt import render_brief_prompt

logger = logging.getLogger(__name__)

FALLBACK_BRIEF = "Meeting starts soon."
UNKNOWN = "Unknown"
DEFAULT_USER_EMAIL = "user@example.com"
DEFAULT_USER_NAME = "User"


@dataclass
class ParticipantBrief:
    name: str
    email: str
    company: Optional[str] = None
    research: Optional[str] = None


@dataclass
class UserContext:
    """Who the brief is for."""

    email: str = ""
    name: str = ""
    title: Optional[str] = None
    company: Optional[str] = None
    bio: Optional[str] = None

    @property
    def verified(self) -> bool:
        # Raw fields only: an empty context renders as "User" but stays unverified
        return bool(self.name or self.title or self.company)

    def as_template_vars(self) -> Dict[str, object]:
        return {
            "verified": self.verified,
            "email": self.email or DEFAULT_USER_EMAIL,
            "name": self.name or DEFAULT_USER_NAME,
            "title": self.title,
            "company": self.company,
            "bio": self.bio,
        }


@dataclass
class BriefResult:
    brief: str
    prompt: str
    participants: List[ParticipantBrief]


def needs_directory_lookup(name: str) -> bool:
    return looks_like_email(name) or name == UNKNOWN


def is_self_reference(name: str) -> bool:
    # Calendar UIs label the current user as "you"
    return "you" in name.lower()


class MeetingBriefAgent:
    """
    Orchestrates directory lookup, enrichment and the LLM for one meeting.
    """

    def __init__(
        self,
        people_lookup: PeopleLookup,
        enrichment: EnrichmentService,
        llm: LLMClient,
        max_participants: int = 5,
    ):
        self.people_lookup = people_lookup
        self.enrichment = enrichment
        self.llm = llm
        self.max_participants = max_participants

    def _resolve_participants(self, meeting: Meeting, credential: str) -> List[ParticipantBrief]:
        enriched_by_email: Dict[str, EnrichmentResult] = {}
        briefs = []

        for participant in meeting.participants[: self.max_participants]:
            email = participant.email
            name = participant.display_name or email
            company = None

            if needs_directory_lookup(name):
                try:
                    resolved = self.people_lookup.resolve_display_name(email, credential)
                except Exception as e:
                    log_error(e, {"action": "people_lookup", "email": email})
                    resolved = None
                if resolved is not None:
                    name = resolved.name
                    company = resolved.company

            research = None
            if not is_self_reference(name):
                key = email.lower()
                if key not in enriched_by_email:
                    enriched_by_email[key] = self._enrich(name, email)
                enriched = enriched_by_email[key]
                if enriched.company_name:
                    company = enriched.company_name
                research = enriched.research_summary

            if company == UNKNOWN:
                company = None
            briefs.append(ParticipantBrief(name=name, email=email, company=company, research=research))

        return briefs

    def _enrich(self, name: str, email: str) -> EnrichmentResult:
        try:
            return self.enrichment.process_enrichment(name, email)
        except Exception as e:
            log_error(e, {"action": "enrichment", "email": email})
            return EnrichmentResult()

    def generate_brief(self, meeting: Meeting, credential: str, user: Optional[UserContext] = None) -> BriefResult:
        """
        Generate a brief for a meeting.

        Args:
            meeting: Meeting to brief
            credential: Access token for the contact directory
            user: Context about the person being briefed

        Returns:
            BriefResult with the brief text (FALLBACK_BRIEF on LLM failure) and the prompt used
        """
        logger.info(f"Generating brief for '{meeting.title}'")
        user = user or UserContext()

        participants = self._resolve_participants(meeting, credential)
        prompt = render_brief_prompt(
            meeting,
            participants=[vars(p) for p in participants],
            user=user.as_template_vars(),
        )

        try:
            with timing("llm_complete") as timer:
                brief = self.llm.complete(prompt)
        except LLMError as e:
            logger.warning(f"Brief generation failed for '{meeting.title}': {e}")
            return BriefResult(brief=FALLBACK_BRIEF, prompt=prompt, participants=participants)

        logger.info(f"Brief generated for '{meeting.title}' in {timer.get_duration_ms():.0f}ms")
        return BriefResult(brief=brief, prompt=prompt, participants=participants)
