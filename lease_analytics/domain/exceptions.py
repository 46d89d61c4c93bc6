"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidReportDataError(DomainException):
    """Report payload is structurally malformed and cannot be mapped to domain records"""

    pass
