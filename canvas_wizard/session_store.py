"""
Server-side wizard session storage.

The browser only holds an opaque session id cookie. Each request loads a
WizardContext from the configured store, the controller mutates it, and the
route saves it back before responding.
"""
import copy
import json
import logging
import os
import threading
import time
import uuid

from canvas_wizard.config import config, DEFAULT_AI_PROVIDER, AI_PROVIDERS

logger = logging.getLogger(__name__)

WIZARD_STEPS = (1, 2, 3)


def coerce_step(value, default=1):
    """Return value as a wizard step (1, 2 or 3), or default."""
    try:
        step = int(value)
    except (TypeError, ValueError):
        return default
    return step if step in WIZARD_STEPS else default


class WizardSession:
    """All state the wizard keeps for one browser session."""

    def __init__(self):
        self.current_step = 1
        self.gemini_key = ''
        self.claude_key = ''
        self.ai_provider = DEFAULT_AI_PROVIDER
        self.assignment_list = ''
        self.due_dates = ''
        self.matches = []
        self.canvas_errors = []

    @property
    def has_ai_key(self):
        return bool(self.gemini_key or self.claude_key)

    def to_dict(self):
        return {
            "current_step": self.current_step,
            "gemini_key": self.gemini_key,
            "claude_key": self.claude_key,
            "ai_provider": self.ai_provider,
            "assignment_list": self.assignment_list,
            "due_dates": self.due_dates,
            "matches": copy.deepcopy(self.matches),
            "canvas_errors": list(self.canvas_errors),
        }

    @classmethod
    def from_dict(cls, data):
        session = cls()
        if not data:
            return session
        session.current_step = coerce_step(data.get("current_step"))
        session.gemini_key = data.get("gemini_key") or ''
        session.claude_key = data.get("claude_key") or ''
        provider = data.get("ai_provider") or DEFAULT_AI_PROVIDER
        session.ai_provider = provider if provider in AI_PROVIDERS else DEFAULT_AI_PROVIDER
        session.assignment_list = data.get("assignment_list") or ''
        session.due_dates = data.get("due_dates") or ''
        session.matches = copy.deepcopy(data.get("matches") or [])
        session.canvas_errors = list(data.get("canvas_errors") or [])
        return session


# ═══════════════════════════════════════════════════════
# STORES
# ═══════════════════════════════════════════════════════

class SessionStore:
    """Interface: load / save / delete session dicts by id."""

    def load(self, session_id):
        raise NotImplementedError

    def save(self, session_id, data):
        raise NotImplementedError

    def delete(self, session_id):
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """In-process dict store; sessions idle longer than ttl are dropped."""

    def __init__(self, ttl=None):
        self.ttl = config.session_ttl if ttl is None else ttl
        # {session_id: {"data": {...}, "last_active": timestamp}}
        self.sessions = {}
        self._lock = threading.Lock()

    def _cleanup_stale_sessions(self):
        now = time.time()
        stale = [sid for sid, entry in self.sessions.items()
                 if now - entry["last_active"] > self.ttl]
        for sid in stale:
            del self.sessions[sid]

    def load(self, session_id):
        with self._lock:
            self._cleanup_stale_sessions()
            entry = self.sessions.get(session_id)
            if entry is None:
                return None
            entry["last_active"] = time.time()
            return copy.deepcopy(entry["data"])

    def save(self, session_id, data):
        with self._lock:
            self.sessions[session_id] = {
                "data": copy.deepcopy(data),
                "last_active": time.time(),
            }

    def delete(self, session_id):
        with self._lock:
            self.sessions.pop(session_id, None)


class FileSessionStore(SessionStore):
    """JSON file store so sessions survive server restarts."""

    def __init__(self, path=None, ttl=None):
        self.path = path or config.session_file
        self.ttl = config.session_ttl if ttl is None else ttl
        self._lock = threading.Lock()

    def _read_all(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read session file %s: %s", self.path, e)
            return {}

    def _write_all(self, all_sessions):
        os.makedirs(os.path.dirname(self.path) or '.', exist_ok=True)
        cutoff = time.time() - self.ttl
        all_sessions = {k: v for k, v in all_sessions.items() if v.get("last_active", 0) > cutoff}
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(all_sessions, f, indent=2)

    def load(self, session_id):
        with self._lock:
            entry = self._read_all().get(session_id)
        if entry is None or time.time() - entry.get("last_active", 0) > self.ttl:
            return None
        return entry.get("data")

    def save(self, session_id, data):
        with self._lock:
            all_sessions = self._read_all()
            all_sessions[session_id] = {"data": data, "last_active": time.time()}
            self._write_all(all_sessions)

    def delete(self, session_id):
        with self._lock:
            all_sessions = self._read_all()
            if all_sessions.pop(session_id, None) is not None:
                self._write_all(all_sessions)


def create_session_store(backend=None):
    """Build the store named by SESSION_BACKEND."""
    backend = (backend or config.session_backend or 'memory').lower()
    if backend == 'file':
        return FileSessionStore()
    if backend != 'memory':
        logger.warning("Unknown SESSION_BACKEND %r, using memory", backend)
    return MemorySessionStore()


# ═══════════════════════════════════════════════════════
# REQUEST CONTEXT
# ═══════════════════════════════════════════════════════

class WizardContext:
    """Per-request view of the session plus the messages to render."""

    def __init__(self, store, session_id, session):
        self.store = store
        self.session_id = session_id
        self.session = session
        self.error = None
        self.success = None

    @classmethod
    def load(cls, store, session_id=None):
        data = store.load(session_id) if session_id else None
        if data is None:
            return cls(store, session_id or uuid.uuid4().hex, WizardSession())
        return cls(store, session_id, WizardSession.from_dict(data))

    def save(self):
        self.store.save(self.session_id, self.session.to_dict())

    def reset(self):
        """Drop everything stored for this session and start over at step 1."""
        self.store.delete(self.session_id)
        self.session_id = uuid.uuid4().hex
        self.session = WizardSession()
