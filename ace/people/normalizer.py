"""
Person name normalization.

Cleans the two sides of a profile comparison: the name we searched for
(which may be an email username, a "Last, First" directory entry or carry
annotations) and the name shown in a search-result title (which may carry
credentials, vanity-URL digits and other noise).
"""

import re
import string
from typing import List

from ace.people.domains import looks_like_email

NAME_SUFFIXES = frozenset({"PHD", "MD", "MBA", "ESQ", "JR", "SR", "II", "III", "IV"})

_PARENTHETICAL = re.compile(r"\(.*?\)")
_BRACKETED = re.compile(r"\[.*?\]")
_TRAILING_DIGITS = re.compile(r"\s+\d{3,}$")
_WHITESPACE = re.compile(r"\s+")


def query_name_from(name: str) -> str:
    """
    Return the name to use in search queries.

    An email-looking name is reduced to its local part.
    """
    name = (name or "").strip()
    if looks_like_email(name):
        local = name.split("@", 1)[0]
        return local or name
    return name


def clean_search_name(raw_name: str) -> str:
    """
    Normalize the name we are searching for.

    Removes parenthetical and bracketed annotations and reorders a
    "Last, First" name into "First Last".

    Args:
        raw_name: Name as supplied by the caller

    Returns:
        Cleaned name (may be empty)
    """
    name = _PARENTHETICAL.sub(" ", raw_name or "")
    name = _BRACKETED.sub(" ", name)
    name = _WHITESPACE.sub(" ", name).strip()

    if name.count(",") == 1:
        last, first = (part.strip() for part in name.split(","))
        if last and first:
            return f"{first} {last}"

    return name


def _is_junk_token(token: str) -> bool:
    if token.replace(".", "").upper() in NAME_SUFFIXES:
        return True
    has_letters = any(ch.isalpha() for ch in token)
    has_digits = any(ch.isdigit() for ch in token)
    return has_letters and has_digits and len(token) > 5


def clean_candidate_name(raw_name: str) -> str:
    """
    Clean a name taken from a search-result title.

    Strips a trailing run of 3+ digits, credential/suffix tokens (PhD, Jr, III...)
    and long letter+digit codes.

    Args:
        raw_name: Name segment of a result title

    Returns:
        Space-joined cleaned tokens
    """
    cleaned = _TRAILING_DIGITS.sub("", (raw_name or "").strip())

    tokens = []
    for word in cleaned.split():
        token = word.strip(string.punctuation)
        if not token or _is_junk_token(token):
            continue
        tokens.append(token)

    return " ".join(tokens)


def name_tokens(name: str) -> List[str]:
    """Lowercase whitespace tokens of a name, surrounding punctuation removed."""
    tokens = (token.strip(string.punctuation).lower() for token in (name or "").split())
    return [token for token in tokens if token]
