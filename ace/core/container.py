from dataclasses import dataclass
from typing import Optional

from ace.calendar.provider import MeetingSource, select_meeting_source
from ace.channels.push import DisplaySink, select_display_sink
from ace.core.config import AppConfig, load_config
from ace.enrichment.service import EnrichmentService, create_enrichment_cache
from ace.llm.service import LLMClient, select_llm_client
from ace.notifications.agent import NotificationAgent
from ace.notifications.routines import RoutineEvaluator
from ace.notifications.state import DisplayStateRegistry
from ace.people.lookup import PeopleLookup, select_people_lookup
from ace.profile.store import UserSessionStore
from ace.research.orchestrator import SearchOrchestrator
from ace.research.provider import SearchProvider, select_search_provider
from ace.services.brief_agent import MeetingBriefAgent


@dataclass
class Services:
    """Every long-lived collaborator, constructed once per process."""

    config: AppConfig
    sessions: UserSessionStore
    meeting_source: MeetingSource
    search_provider: SearchProvider
    people_lookup: PeopleLookup
    llm: LLMClient
    sink: DisplaySink
    enrichment: EnrichmentService
    brief_agent: MeetingBriefAgent
    display_states: DisplayStateRegistry
    agent: NotificationAgent


def build_services(
    config: Optional[AppConfig] = None,
    *,
    meeting_source: Optional[MeetingSource] = None,
    search_provider: Optional[SearchProvider] = None,
    people_lookup: Optional[PeopleLookup] = None,
    llm: Optional[LLMClient] = None,
    sink: Optional[DisplaySink] = None,
    sessions: Optional[UserSessionStore] = None,
) -> Services:
    """
    Wire the service graph from configuration.

    Any collaborator can be passed explicitly (tests pass fakes); the rest are
    selected from config.

    Raises:
        ValueError: unknown CALENDAR_PROVIDER or PUSH_DRIVER
    """
    config = config or load_config()

    meeting_source = meeting_source or select_meeting_source(config)
    search_provider = search_provider or select_search_provider(config)
    people_lookup = people_lookup or select_people_lookup(config)
    llm = llm or select_llm_client(config)
    sink = sink or select_display_sink(config)

    enrichment = EnrichmentService(
        SearchOrchestrator(search_provider),
        cache=create_enrichment_cache(config.enrichment_cache_ttl_minutes),
    )
    brief_agent = MeetingBriefAgent(
        people_lookup=people_lookup,
        enrichment=enrichment,
        llm=llm,
        max_participants=config.max_brief_participants,
    )
    display_states = DisplayStateRegistry()
    agent = NotificationAgent(
        meeting_source=meeting_source,
        evaluator=RoutineEvaluator(brief_agent=brief_agent, rich_briefs=config.rich_briefs),
        display_states=display_states,
        sink=sink,
    )

    return Services(
        config=config,
        sessions=sessions or UserSessionStore(),
        meeting_source=meeting_source,
        search_provider=search_provider,
        people_lookup=people_lookup,
        llm=llm,
        sink=sink,
        enrichment=enrichment,
        brief_agent=brief_agent,
        display_states=display_states,
        agent=agent,
    )
