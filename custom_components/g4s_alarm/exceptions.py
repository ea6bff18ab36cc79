"""Errors raised by the G4S client, engine and dispatcher."""


class G4SError(Exception):
    """Base class for G4S alarm errors."""


class RemoteUnavailable(G4SError):
    """The G4S service could not be reached or returned a bad response."""


class AuthenticationFailed(RemoteUnavailable):
    """The G4S service rejected the configured credentials."""


class UnmappedRemoteValue(G4SError):
    """The panel reported an arm state with no target-state equivalent."""


class InvalidTarget(G4SError, ValueError):
    """A set request named a state that cannot be commanded."""


class MissingPanelIdentifier(G4SError):
    """No panel identifier is configured for the entry."""
