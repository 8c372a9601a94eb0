"""
Onboarding Session Store

A session is one caller's progress through the merchant application,
keyed by an opaque id (the ChatGPT subject). Records live in process
memory only; nothing survives a restart.
"""

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

# 0 = unauthenticated, 1 = authenticated, 2..6 = profile sections saved
STEP_UNAUTHENTICATED = 0
STEP_COMPLETE = 6


@dataclass
class OnboardingSession:
    authenticated: bool = False
    current_step: int = STEP_UNAUTHENTICATED
    profile: Dict[str, Any] = field(default_factory=dict)
    application_id: Optional[str] = None
    email: Optional[str] = None
    user_id: Optional[str] = None

    def copy(self) -> 'OnboardingSession':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape of the record (camelCase, as the widgets read it)."""
        return {
            'authenticated': self.authenticated,
            'currentStep': self.current_step,
            'profile': copy.deepcopy(self.profile),
            'applicationId': self.application_id,
            'email': self.email,
            'userId': self.user_id,
        }


class SessionStore:
    """Interface the dispatcher depends on."""

    def get(self, session_id: str) -> Optional[OnboardingSession]:
        raise NotImplementedError

    def set(self, session_id: str, session: OnboardingSession) -> None:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError

    @contextmanager
    def lock(self, session_id: str):
        """Serialize read-modify-write cycles on one session id."""
        yield


class InMemorySessionStore(SessionStore):
    """
    Process-local store. Records are copied in and out so a handler can
    never mutate stored state except through set().
    """

    def __init__(self):
        self._sessions: Dict[str, OnboardingSession] = {}
        # session id -> [lock, number of callers holding or waiting on it]
        self._locks: Dict[str, list] = {}
        self._guard = threading.Lock()

    def get(self, session_id):
        with self._guard:
            session = self._sessions.get(session_id)
        return session.copy() if session is not None else None

    def set(self, session_id, session):
        with self._guard:
            self._sessions[session_id] = session.copy()

    def delete(self, session_id):
        with self._guard:
            self._sessions.pop(session_id, None)

    @contextmanager
    def lock(self, session_id):
        with self._guard:
            entry = self._locks.get(session_id)
            if entry is None:
                entry = self._locks[session_id] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            # Last caller out drops the lock so ids never seen again don't pile up
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[session_id]

    def __contains__(self, session_id):
        with self._guard:
            return session_id in self._sessions

    def __len__(self):
        with self._guard:
            return len(self._sessions)
