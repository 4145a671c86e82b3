"""Custom exceptions for the application."""


class QuishGuardError(Exception):
    """Base exception for the threat analysis engine."""
    pass


class ValidationError(QuishGuardError):
    """Raised when a URL or request parameter is invalid."""
    pass


class StrategyFailure(QuishGuardError):
    """Raised when a single check cannot produce a verdict."""
    pass


class ConfigurationMissing(QuishGuardError):
    """Raised when an optional collaborator is queried without a credential."""
    pass


class APIError(QuishGuardError):
    """Raised when external API call fails."""
    pass


class AggregationFailure(QuishGuardError):
    """Raised when check outcomes cannot be combined into a report."""
    pass


class ReportingError(QuishGuardError):
    """Raised when a threat report submission fails."""
    pass
