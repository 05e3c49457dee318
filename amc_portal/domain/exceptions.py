"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAllocationInput(DomainException):
    """Annual hour budget is negative or otherwise unusable"""

    pass


class UnrecognizedPaymentTerm(DomainException):
    """Payment term is outside Monthly/Quarterly/Half-Yearly/Yearly"""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Unrecognized payment term: {value!r}")


class InvalidStatusTransition(DomainException):
    """Requested status change is not allowed from the current status"""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from '{current}' to '{target}'")
