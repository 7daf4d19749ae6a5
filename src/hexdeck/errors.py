"""Exception types raised by the server supervisor."""


class SupervisorError(Exception):
    """Base class for recoverable supervisor failures."""


class EnvironmentUnresolvedError(SupervisorError):
    """The config or resource directory could not be determined."""


class ServerBinaryNotFoundError(SupervisorError):
    """The bundled server executable is missing."""


class SpawnError(SupervisorError):
    """The server executable could not be launched."""
