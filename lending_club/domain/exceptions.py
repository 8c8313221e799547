"""Domain-specific exceptions raised by the lending entities"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NegativeAmountError(DomainException):
    """Tried adding or deducting a negative amount of credits"""

    pass


class InvalidContractError(DomainException):
    """Contract terms are malformed (non-positive duration, negative price)"""

    pass


class AlreadyUnderContractError(DomainException):
    """Item already has a contract that has not expired yet"""

    pass


class ContractOverlapError(AlreadyUnderContractError):
    """New contract window overlaps a contract in the item's history"""

    pass


class AlreadyOwnedError(DomainException):
    """Member already owns the given item"""

    pass


class NotOwnedError(DomainException):
    """Member does not own the given item"""

    pass


class InconsistentContractsError(DomainException):
    """Item's contract state contradicts its history or its owner"""

    pass
