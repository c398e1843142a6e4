"""Error taxonomy surfaced by the service layer.

Remote-call failures never appear here: they are absorbed by the intake
adapter. Not-found on toggle/delete is a no-op, not an error.
"""


class LifeSyncError(Exception):
    """Base class for errors that reach the user."""


class InputValidationError(LifeSyncError):
    """A required field is empty. No state was changed."""


class DeviceUnavailableError(LifeSyncError):
    """The audio capture device could not be acquired."""


class OperationInProgressError(LifeSyncError):
    """A create operation is already awaiting the inference backend."""


class RecordingNotFoundError(LifeSyncError):
    """No active recording with the given id."""


class RecordingClosedError(LifeSyncError):
    """The recording was already stopped or cancelled."""
