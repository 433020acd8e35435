"""
Exceptions raised by the thumbnail janitor.
"""


class JanitorError(Exception):
    pass


class ConfigurationError(JanitorError):
    """
    Raised when the process configuration cannot be used to start the worker.
    """

    pass


class DatabaseConnectionError(JanitorError):
    """
    Raised when the initial connection to the database cannot be established.
    """

    def __init__(self, database_uri: str, reason: str):
        self.database_uri = database_uri
        self.reason = reason
        super().__init__(f"Could not connect to {database_uri}: {reason}")
