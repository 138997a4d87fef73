"""
Company name heuristics over search-result titles.

Titles of corporate landing pages look like "Acme Corp - Welcome",
"Login | Acme Portal" or "Work with Acme". These helpers pick the segment
that names the organization, using the email domain as the anchor.
"""

import re
from typing import List, Optional

# "-" "|" ":" bullet, middle dot, en dash, em dash
TITLE_SEPARATORS = re.compile("[-|:•·–—]")

LANDING_PAGE_PREFIXES = ("welcome", "login", "home", "signin", "sign in", "portal", "dashboard")

DOMAIN_PREFIX_CHARS = 5

_WITH = re.compile(r" with ", re.IGNORECASE)


def split_title(title: str) -> List[str]:
    """Split a title on separator characters into trimmed, non-empty segments."""
    segments = (segment.strip() for segment in TITLE_SEPARATORS.split(title or ""))
    return [segment for segment in segments if segment]


def domain_base(domain: str) -> str:
    """
    Return the label of a domain that most likely names the organization.

    Examples:
        acme.com -> acme
        cs.stanford.edu -> stanford
        www.acme.co -> acme
    """
    parts = (domain or "").lower().split(".")
    base = parts[0]
    if len(parts) >= 3:
        if parts[-1] in ("edu", "gov"):
            base = parts[-2]
        elif len(parts[0]) <= 3:
            base = parts[1]
    return base


def _is_landing_page_segment(segment: str) -> bool:
    return segment.lower().startswith(LANDING_PAGE_PREFIXES)


def _squash(segment: str) -> str:
    return segment.lower().replace(" ", "").replace(".", "").replace("-", "")


def extract_company_name(title: str, domain: str) -> str:
    """
    Extract an organization name from a search-result title.

    Args:
        title: Result title
        domain: Reference email domain (may be empty)

    Returns:
        Best guess at the company name; the raw title if it has no segments
    """
    segments = split_title(title)

    if len(segments) == 1:
        parts = _WITH.split(segments[0], maxsplit=1)
        if len(parts) == 2 and parts[1].strip():
            return parts[1].strip()

    domain = (domain or "").strip().lower()
    if domain and segments:
        if segments[0].lower().startswith(domain):
            return domain

        base = domain_base(domain)
        prefix = base[:min(DOMAIN_PREFIX_CHARS, len(base))]
        if prefix:
            for segment in segments:
                if _squash(segment).startswith(prefix):
                    return segment

    if segments and _is_landing_page_segment(segments[0]):
        for segment in segments[1:]:
            if not _is_landing_page_segment(segment):
                return segment

    return segments[0] if segments else title


def company_from_profile_title(title: str, person_name: str) -> Optional[str]:
    """
    Guess the employer from a profile result title.

    "Jane Doe - VP Sales - Initech | LinkedIn" -> "Initech"

    Args:
        title: Profile result title
        person_name: Name the profile was found for

    Returns:
        Last segment that is neither the person nor the site name, or None
    """
    lower_name = (person_name or "").strip().lower()
    remaining = []
    for segment in split_title(title):
        lowered = segment.lower()
        if "linkedin" in lowered:
            continue
        if lower_name and (lower_name in lowered or lowered in lower_name):
            continue
        remaining.append(segment)
    return remaining[-1] if remaining else None
