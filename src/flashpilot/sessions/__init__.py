from flashpilot.sessions.store import MemoryStore, SessionData, SessionStore

__all__ = ["MemoryStore", "SessionData", "SessionStore"]
