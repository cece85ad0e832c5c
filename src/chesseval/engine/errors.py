"""Exceptions raised by the engine layer."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for engine channel and session failures."""


class EngineStartError(EngineError):
    """The engine process could not be created or did not complete the handshake."""


class EngineFaultError(EngineError):
    """The engine process is gone or not usable until the session is restarted."""


class EngineBusyError(EngineError):
    """An evaluation was requested while another one is still in flight."""
