"""Custom exception hierarchy for the gradeavg application.

Everything here is fatal for a run. Parsing problems never raise; they
surface as absent values and the affected row is dropped.
"""


class GradeAvgError(Exception): ...


class ConfigError(GradeAvgError):
    """Error caused by invalid user configuration."""


class CredentialsError(GradeAvgError):
    """Error caused by failing to read credentials from the terminal."""


class TransportError(GradeAvgError):
    """Error caused by a failed request to the portal."""


class LoginError(GradeAvgError):
    """Error caused by the portal rejecting the login."""


class NoDataError(GradeAvgError):
    """Error caused by having no graded modules to aggregate."""
