"""Exception types raised by apiaudit."""


class AuditError(Exception):
    """Base class for apiaudit errors."""


class LinguisticResourceError(AuditError):
    """The natural-language resources could not be installed or loaded."""


class ManifestError(AuditError):
    """An endpoint manifest or selector could not be turned into endpoints."""


class ConfigError(AuditError):
    """The audit configuration file is invalid."""
