"""
Profile match validation.

Decides whether a profile search result plausibly belongs to the person we
searched for. The check is deliberately name-centric: ranking already biases
results toward the right company, so context is only enforced when the
search name is a single token and therefore weak on its own.
"""

import re
from typing import NamedTuple

from ace.people.normalizer import clean_candidate_name, clean_search_name, name_tokens
from ace.research.types import SearchHit

TITLE_NAME_SEPARATORS = re.compile(r"[-|]")

CONTEXT_PREFIX_CHARS = 6


class ProfileMatchDecision(NamedTuple):
    accepted: bool
    reason: str


def _accept(reason: str) -> ProfileMatchDecision:
    return ProfileMatchDecision(True, reason)


def _reject(reason: str) -> ProfileMatchDecision:
    return ProfileMatchDecision(False, reason)


def candidate_name_from_title(title: str) -> str:
    """First '-'/'|' segment of a result title, cleaned of credentials and noise."""
    first_segment = TITLE_NAME_SEPARATORS.split(title or "", maxsplit=1)[0].strip()
    return clean_candidate_name(first_segment)


def context_appears_in(context: str, hit: SearchHit) -> bool:
    """
    Check that the start of the context string shows up in the result text.

    Spaces are ignored on both sides so "Acme Corp" matches "acmecorp.com".
    """
    prefix = (context or "").replace(" ", "").lower()[:CONTEXT_PREFIX_CHARS]
    if not prefix:
        return True
    combined = f"{hit.title} {hit.snippet}".replace(" ", "").lower()
    return prefix in combined


def _matches_email_username(username: str, candidate: list) -> bool:
    # "jsmith" -> "John Smith"
    if len(username) <= 3 or len(candidate) < 2:
        return False
    return username.startswith(candidate[0][:1]) and candidate[-1] in username


def _validate_single_token(search_token: str, candidate: list, context: str, hit: SearchHit) -> ProfileMatchDecision:
    if candidate[0].startswith(search_token):
        matched_by = "first name prefix"
    elif _matches_email_username(search_token, candidate):
        matched_by = "email username"
    else:
        return _reject(f"first name mismatch ('{search_token}' vs '{candidate[0]}')")

    if not context_appears_in(context, hit):
        return _reject("domain context fail")

    return _accept(f"single-name match ({matched_by})")


def _validate_full_name(search: list, candidate: list, hit: SearchHit) -> ProfileMatchDecision:
    if len(candidate) < 2:
        return _reject(f"candidate name too short ('{' '.join(candidate)}')")

    s_first, s_last = search[0], search[-1]
    c_first, c_last = candidate[0], candidate[-1]

    if s_first[:2] != c_first[:2] and s_first[:1] != c_first[:1]:
        return _reject(f"first name mismatch ('{s_first}' vs '{c_first}')")

    if s_last[:2] != c_last[:2]:
        if s_last in c_last:
            return _accept(f"last name contained ('{s_last}' in '{c_last}')")
        if s_last in (hit.title or "").lower():
            return _accept(f"alternate last name in title ('{s_last}')")
        if s_last[:1] != c_last[:1]:
            return _reject(f"last name mismatch ('{s_last}' vs '{c_last}')")

    return _accept("name match")


def validate_profile_match(search_name: str, context: str, hit: SearchHit) -> ProfileMatchDecision:
    """
    Decide whether a search result identifies the searched person.

    Args:
        search_name: Name (or email username) we searched for
        context: Company name or domain used to disambiguate; may be empty
        hit: Search result to check

    Returns:
        ProfileMatchDecision(accepted, reason)
    """
    search = name_tokens(clean_search_name(search_name))
    if not search:
        return _reject("empty search name")

    candidate_name = candidate_name_from_title(hit.title)
    candidate = name_tokens(candidate_name)
    if not candidate:
        return _reject("could not parse a name from the title")

    if len(search) == 1:
        return _validate_single_token(search[0], candidate, context, hit)

    return _validate_full_name(search, candidate, hit)
