"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidDateError(DomainException):
    """Date string is not a canonical YYYY-MM-DD value"""

    pass


class InvalidCycleConfigError(DomainException):
    """Cycle start/end day outside 1..31"""

    pass


class InvalidObligationError(DomainException):
    """Recurring obligation definition is inconsistent"""

    pass


class InvalidCreditCardError(DomainException):
    """Credit card definition is inconsistent"""

    pass


class ObligationNotFoundError(DomainException):
    """No obligation with the requested id"""

    pass


class TransactionNotFoundError(DomainException):
    """No transaction with the requested id"""

    pass


class PastDayOffError(DomainException):
    """Day-off markers cannot be changed for days already gone in the current cycle"""

    pass


class OccurrenceNotFoundError(DomainException):
    """Obligation has no occurrence on the requested date"""

    pass


class CreditCardNotFoundError(DomainException):
    """No credit card with the requested id"""

    pass
