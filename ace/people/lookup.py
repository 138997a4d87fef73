"""
Contact directory lookup.

Resolves a bare email address to a display name (and employer, when the
directory has one) using the user's own contacts.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, NamedTuple, Optional

import httpx

from ace.core.config import AppConfig

logger = logging.getLogger(__name__)

PEOPLE_SEARCH_URL = "https://people.googleapis.com/v1/people:searchContacts"


class PersonInfo(NamedTuple):
    name: str
    company: Optional[str] = None


def _first_field(person: dict, list_key: str, field: str) -> Optional[str]:
    """Read field from the first entry of person[list_key]; None unless it is a non-empty string."""
    entries = person.get(list_key)
    if not isinstance(entries, list) or not entries or not isinstance(entries[0], dict):
        return None
    value = entries[0].get(field)
    return value if isinstance(value, str) and value else None


class PeopleLookup(ABC):
    """Base interface for contact directory lookups."""

    @abstractmethod
    def resolve_display_name(self, email: str, credential: str) -> Optional[PersonInfo]:
        """
        Look up a person by email.

        Returns:
            PersonInfo, or None when not found or the lookup failed
        """
        ...


class StubPeopleLookup(PeopleLookup):
    """In-memory directory for local runs and tests."""

    def __init__(self, directory: Optional[Dict[str, PersonInfo]] = None):
        self.directory = {k.lower(): v for k, v in (directory or {}).items()}
        self.lookups = []

    def resolve_display_name(self, email: str, credential: str) -> Optional[PersonInfo]:
        self.lookups.append(email)
        return self.directory.get(email.lower())


class GooglePeopleLookup(PeopleLookup):
    """Google People API (people:searchContacts) lookup."""

    def __init__(self, timeout: float = 10.0, http_client: Optional[httpx.Client] = None):
        self.timeout = timeout
        self._client = http_client

    def resolve_display_name(self, email: str, credential: str) -> Optional[PersonInfo]:
        if not email or not credential:
            return None

        params = {
            "query": email,
            "readMask": "names,emailAddresses,organizations",
            "pageSize": "1",
        }
        headers = {"Authorization": f"Bearer {credential}"}

        try:
            if self._client is not None:
                response = self._client.get(PEOPLE_SEARCH_URL, headers=headers, params=params, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(PEOPLE_SEARCH_URL, headers=headers, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"People API request failed: {type(e).__name__}")
            return None

        if response.status_code != 200:
            logger.warning(f"People API error: {response.status_code}")
            return None

        try:
            data = response.json()
        except ValueError:
            logger.warning("People API returned an unreadable body")
            return None

        results = data.get("results") if isinstance(data, dict) else None
        if not results or not isinstance(results, list):
            return None

        result = results[0] if isinstance(results[0], dict) else {}
        person = result.get("person")
        if not isinstance(person, dict):
            person = {}

        name = _first_field(person, "names", "displayName") or email
        company = _first_field(person, "organizations", "name")
        logger.info(f"Resolved '{email}' to '{name}'")
        return PersonInfo(name=name, company=company)


def select_people_lookup(config: AppConfig) -> PeopleLookup:
    if not config.people_lookup_enabled:
        return StubPeopleLookup()
    return GooglePeopleLookup(timeout=config.people_timeout_seconds)
