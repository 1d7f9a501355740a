"""
Permission Errors - Caller misuse and OS query failures.

Denials are never exceptions; they are Outcome values. Exceptions here mean
the library was used incorrectly or the OS could not answer.
"""


class PermissionFlowError(Exception):
    """Base class for all permflow errors."""


class InvalidKeyError(PermissionFlowError):
    """The OS could not answer a query for a permission key."""

    def __init__(self, key: object, reason: str = ""):
        self.key = key
        message = f"Invalid permission key: {key!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class LauncherNotRegisteredError(PermissionFlowError):
    """A launch was attempted before the launcher was registered."""

    def __init__(self, channel: str):
        self.channel = channel
        super().__init__(
            f"PermissionLauncher not registered ({channel} channel). "
            "Call register() before requesting permissions."
        )


class LaunchInProgressError(PermissionFlowError):
    """A second launch was attempted while one is still awaiting its result."""

    def __init__(self, channel: str, pending: object):
        self.channel = channel
        self.pending = pending
        super().__init__(
            f"A {channel} permission launch is already in flight for {pending!r}; "
            "wait for it to resolve before requesting again."
        )


class LaunchCancelledError(PermissionFlowError):
    """The launcher was unregistered before the launch resolved."""

    def __init__(self, channel: str):
        self.channel = channel
        super().__init__(f"The {channel} permission launch was cancelled")


class ConfigError(PermissionFlowError):
    """A configuration file or capability profile could not be used."""

    def __init__(self, message: str, path: object = None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
