import os
from typing import Optional

from pydantic import BaseModel


def env_bool(key: str, default: bool = False) -> bool:
    """Read a boolean env var consistently. True for 'true', '1', 'yes' (case-insensitive)."""
    raw = (os.getenv(key) or "").strip().lower()
    if not raw:
        return default
    return raw in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    raw = (os.getenv(key) or "").strip()
    return int(raw) if raw.lstrip("-").isdigit() else default


def _env_float(key: str, default: float) -> float:
    raw = (os.getenv(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


class AppConfig(BaseModel):
    # Web search (Google Custom Search JSON API)
    google_search_api_key: Optional[str] = None
    google_search_engine_id: Optional[str] = None
    search_results_per_query: int = 5
    search_timeout_seconds: float = 10.0
    search_max_attempts: int = 2
    search_retry_delay_seconds: float = 1.0

    # Text generation
    llm_enabled: bool = False
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    llm_timeout_seconds: float = 30.0

    # People lookup / calendar
    people_lookup_enabled: bool = True
    people_timeout_seconds: float = 10.0
    calendar_provider: str = "google"
    calendar_timeout_seconds: float = 15.0

    # Delivery
    push_driver: str = "console"

    # Briefs and enrichment
    rich_briefs: bool = False
    max_brief_participants: int = 5
    enrichment_cache_ttl_minutes: int = 0

    # Agent loop
    run_agent: bool = False
    agent_interval_seconds: int = 60
    agent_initial_delay_seconds: int = 5
    agent_max_workers: int = 4

    api_key: Optional[str] = None


def load_config() -> AppConfig:
    return AppConfig(
        google_search_api_key=os.getenv("GOOGLE_SEARCH_API_KEY") or None,
        google_search_engine_id=os.getenv("GOOGLE_SEARCH_ENGINE_ID") or None,
        search_results_per_query=_env_int("SEARCH_RESULTS_PER_QUERY", 5),
        search_timeout_seconds=_env_float("SEARCH_TIMEOUT_SECONDS", 10.0),
        search_max_attempts=max(1, _env_int("SEARCH_MAX_ATTEMPTS", 2)),
        search_retry_delay_seconds=_env_float("SEARCH_RETRY_DELAY_SECONDS", 1.0),
        llm_enabled=env_bool("LLM_ENABLED", False),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        llm_timeout_seconds=_env_float("LLM_TIMEOUT_SECONDS", 30.0),
        people_lookup_enabled=env_bool("PEOPLE_LOOKUP_ENABLED", True),
        people_timeout_seconds=_env_float("PEOPLE_TIMEOUT_SECONDS", 10.0),
        calendar_provider=os.getenv("CALENDAR_PROVIDER", "google").lower(),
        calendar_timeout_seconds=_env_float("CALENDAR_TIMEOUT_SECONDS", 15.0),
        push_driver=os.getenv("PUSH_DRIVER", "console").lower(),
        rich_briefs=env_bool("RICH_BRIEFS", False),
        max_brief_participants=max(0, _env_int("MAX_BRIEF_PARTICIPANTS", 5)),
        enrichment_cache_ttl_minutes=max(0, _env_int("ENRICHMENT_CACHE_TTL_MIN", 0)),
        run_agent=os.getenv("RUN_AGENT", "0") == "1",
        agent_interval_seconds=max(1, _env_int("AGENT_INTERVAL_SECONDS", 60)),
        agent_initial_delay_seconds=max(0, _env_int("AGENT_INITIAL_DELAY_SECONDS", 5)),
        agent_max_workers=max(1, _env_int("AGENT_MAX_WORKERS", 4)),
        api_key=os.getenv("API_KEY") or None,
    )
