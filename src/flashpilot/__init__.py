"""FlashPilot: session-backed flash messages and response-rewriting middleware."""

__version__ = "0.1.0"
