from datetime import timedelta
from unittest.mock import MagicMock

from ace.calendar.types import Participant
from ace.enrichment.models import EnrichmentResult
from ace.enrichment.service import EnrichmentService
from ace.llm.service import LLMClient, LLMError, StubLLMClient
from ace.people.lookup import PersonInfo, StubPeopleLookup
from ace.services.brief_agent import FALLBACK_BRIEF, MeetingBriefAgent, UserContext, needs_directory_lookup
from tests.helpers import make_meeting


class FailingLLM(LLMClient):
    def complete(self, prompt):
        raise LLMError("Gemini API error: 500")


def _enrichment(results=None):
    service = MagicMock(spec=EnrichmentService)
    results = results or {}
    service.process_enrichment.side_effect = lambda name, email: results.get(email, EnrichmentResult())
    return service


def _agent(people=None, enrichment=None, llm=None, max_participants=5):
    return MeetingBriefAgent(
        people_lookup=people or StubPeopleLookup(),
        enrichment=enrichment or _enrichment(),
        llm=llm or StubLLMClient("Brief text"),
        max_participants=max_participants,
    )


class TestMeetingBriefAgent:
    """Test participant resolution, prompt content and fallback."""

    def test_prompt_contents(self):
        enrichment = _enrichment({
            "sarah@external.com": EnrichmentResult(
                company_name="External Capital",
                research_summary="Company: External Capital\nSource: https://external.com",
            )
        })
        meeting = make_meeting(
            title="External Strategy Sync",
            participants=[Participant(email="sarah@external.com", display_name="Sarah External")],
        )

        result = _agent(enrichment=enrichment).generate_brief(meeting, "tok")

        assert result.brief == "Brief text"
        assert "- Name: External Strategy Sync" in result.prompt
        assert "- Description: No description" in result.prompt
        assert "- Participants: Sarah External" in result.prompt
        assert "- **Sarah External** (sarah@external.com)" in result.prompt
        assert "  Company: External Capital" in result.prompt
        assert "Source: https://external.com" in result.prompt
        assert "User details: user@example.com (Not fully verified)" in result.prompt
        assert "8. The brief must fit" in result.prompt

    def test_verified_user_context(self):
        user = UserContext(email="jane@acme.com", name="Jane Doe", title="CEO", company="Acme", bio="Founder.")
        result = _agent().generate_brief(make_meeting(description="Quarterly sync"), "tok", user=user)

        assert "Name: Jane Doe\nEmail: jane@acme.com\nTitle: CEO\nCompany: Acme" in result.prompt
        assert "PREPARER BACKGROUND RESEARCH:\nFounder." in result.prompt
        assert "- Description: Quarterly sync" in result.prompt
        assert "Not fully verified" not in result.prompt

    def test_user_defaults(self):
        user = UserContext(title="CEO")
        result = _agent().generate_brief(make_meeting(), "tok", user=user)
        assert "Name: User\nEmail: user@example.com\nTitle: CEO" in result.prompt

    def test_resolves_email_names_through_directory(self):
        people = StubPeopleLookup({"x@y.com": PersonInfo("Xavier Yates", "Yco")})
        meeting = make_meeting(participants=[
            Participant(email="x@y.com"),
            Participant(email="u@v.com", display_name="Unknown"),
            Participant(email="k@v.com", display_name="Known Person"),
        ])

        result = _agent(people=people).generate_brief(meeting, "tok")

        assert people.lookups == ["x@y.com", "u@v.com"]
        assert result.participants[0].name == "Xavier Yates"
        assert result.participants[0].company == "Yco"
        assert result.participants[1].name == "Unknown"
        assert result.participants[1].company is None

    def test_enrichment_overrides_directory_company(self):
        people = StubPeopleLookup({"x@y.com": PersonInfo("Xavier Yates", "Yco")})
        enrichment = _enrichment({"x@y.com": EnrichmentResult(company_name="Y Corporation")})
        meeting = make_meeting(participants=[Participant(email="x@y.com")])

        result = _agent(people=people, enrichment=enrichment).generate_brief(meeting, "tok")

        assert result.participants[0].company == "Y Corporation"

    def test_self_reference_not_enriched(self):
        enrichment = _enrichment()
        meeting = make_meeting(participants=[
            Participant(email="me@acme.com", display_name="You"),
            Participant(email="bo@acme.com", display_name="Bo Smith"),
        ])

        _agent(enrichment=enrichment).generate_brief(meeting, "tok")

        enrichment.process_enrichment.assert_called_once_with("Bo Smith", "bo@acme.com")

    def test_participant_limit_and_dedup(self):
        enrichment = _enrichment()
        participants = [Participant(email="dup@acme.com", display_name="Dup Person")] * 2 + [
            Participant(email=f"p{i}@acme.com", display_name=f"Person {i}") for i in range(6)
        ]
        meeting = make_meeting(participants=participants)

        result = _agent(enrichment=enrichment, max_participants=5).generate_brief(meeting, "tok")

        assert len(result.participants) == 5
        emails = [call.args[1] for call in enrichment.process_enrichment.call_args_list]
        assert emails == ["dup@acme.com", "p0@acme.com", "p1@acme.com", "p2@acme.com"]

    def test_llm_failure_falls_back(self):
        result = _agent(llm=FailingLLM()).generate_brief(make_meeting(), "tok")
        assert result.brief == FALLBACK_BRIEF
        assert "- Name: Strategy Sync" in result.prompt

    def test_meeting_time_in_prompt(self):
        meeting = make_meeting(starts_in=timedelta(minutes=30))
        result = _agent().generate_brief(meeting, "tok")
        assert f"- Time: {meeting.start_time.isoformat()}" in result.prompt

    def test_directory_failure_keeps_email(self):
        people = MagicMock(spec=StubPeopleLookup)
        people.resolve_display_name.side_effect = RuntimeError("people down")
        meeting = make_meeting(participants=[Participant(email="x@y.com")])

        result = _agent(people=people).generate_brief(meeting, "tok")

        assert result.brief == "Brief text"
        assert result.participants[0].name == "x@y.com"
        assert result.participants[0].company is None

    def test_enrichment_failure_leaves_participant_bare(self):
        enrichment = _enrichment()
        enrichment.process_enrichment.side_effect = RuntimeError("search quota")
        meeting = make_meeting(participants=[
            Participant(email="bo@acme.com", display_name="Bo Smith"),
            Participant(email="BO@acme.com", display_name="Bo Smith"),
        ])

        result = _agent(enrichment=enrichment).generate_brief(meeting, "tok")

        assert result.brief == "Brief text"
        assert [p.research for p in result.participants] == [None, None]
        enrichment.process_enrichment.assert_called_once()


class TestNeedsDirectoryLookup:
    def test_email_and_unknown(self):
        assert needs_directory_lookup("x@y.com") is True
        assert needs_directory_lookup("Unknown") is True
        assert needs_directory_lookup("Sarah External") is False
        assert needs_directory_lookup("") is False


class TestUserContext:
    def test_empty_context_is_unverified(self):
        values = UserContext().as_template_vars()
        assert values["verified"] is False
        assert values["name"] == "User"

    def test_any_profile_field_verifies(self):
        assert UserContext(company="Acme").verified is True
