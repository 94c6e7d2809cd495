from __future__ import annotations


class MindMosaicError(Exception):
    """Base class for domain errors raised by the check-in core."""


class OracleError(MindMosaicError):
    """The external sentiment/emotion service failed or returned a malformed payload."""


class PersistenceError(MindMosaicError):
    """The local durable key-value store is unavailable."""


class InvalidTransitionError(MindMosaicError):
    def __init__(self, action: str, stage: str) -> None:
        super().__init__(f"Cannot {action} while check-in is in stage '{stage}'")
        self.action = action
        self.stage = stage


class SessionBusyError(MindMosaicError):
    """A submission arrived while an oracle call for the session is still in flight."""
