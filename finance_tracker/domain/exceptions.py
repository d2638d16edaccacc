"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MalformedDateError(DomainException):
    """A record's date field cannot be parsed"""

    pass


class InvalidPeriodError(DomainException):
    """Requested period has an out-of-range month or year"""

    pass


class AuthenticationError(DomainException):
    """Credentials or token were rejected"""

    pass


class DuplicateUserError(DomainException):
    """A user with this email already exists"""

    pass


class ValidationError(DomainException):
    """Input failed a business rule (e.g. password too short)"""

    pass
