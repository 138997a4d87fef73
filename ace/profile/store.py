import logging
import threading
from typing import Dict, List, Optional

from ace.profile.models import Routine, UserSession

logger = logging.getLogger(__name__)


class UserSessionStore:
    """In-memory registry of active user sessions, keyed by user id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, UserSession] = {}
        self._lock = threading.RLock()

    def register(
        self,
        user_id: str,
        credential: str,
        routines: List[Routine],
        device_token: Optional[str] = None,
        name: Optional[str] = None,
        title: Optional[str] = None,
        company: Optional[str] = None,
        bio: Optional[str] = None,
    ) -> UserSession:
        """
        Register a user, replacing any existing session with the same id.

        A re-registration without a device token keeps the previous one.

        Returns:
            The stored session
        """
        with self._lock:
            previous = self._sessions.get(user_id)
            if device_token is None and previous is not None:
                device_token = previous.device_token
            session = UserSession(
                user_id=user_id,
                credential=credential,
                routines=list(routines),
                device_token=device_token,
                name=name,
                title=title,
                company=company,
                bio=bio,
            )
            self._sessions[user_id] = session

        logger.info(
            f"User registered: {user_id} "
            f"(routines={len(routines)}, device_token={'yes' if device_token else 'no'}, replaced={previous is not None})"
        )
        return session

    def get(self, user_id: str) -> Optional[UserSession]:
        with self._lock:
            return self._sessions.get(user_id)

    def all_users(self) -> List[UserSession]:
        """Snapshot of every registered session."""
        with self._lock:
            return list(self._sessions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
