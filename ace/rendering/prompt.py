from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ace.calendar.types import Meeting

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)


def render_brief_prompt(meeting: Meeting, participants: List[Dict[str, Any]], user: Dict[str, Any]) -> str:
    """
    Render the meeting-brief prompt.

    Args:
        meeting: Meeting being briefed
        participants: Dicts with name, email, company (optional) and research (optional)
        user: Dict with verified, name, email, title, company, bio

    Returns:
        Prompt text for the LLM
    """
    template = _env.get_template("meeting_brief_prompt.j2")
    return template.render(
        meeting=meeting,
        meeting_time=meeting.start_time.isoformat(),
        participants=participants,
        user=user,
    )
