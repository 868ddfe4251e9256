"""Domain-specific exceptions for contract services."""
from apps.core.exceptions import NotFoundError, ValidationError


class ContractNotFoundError(NotFoundError):
    """Raised when a contract does not exist."""
    pass


class PaymentLineNotFoundError(NotFoundError):
    """Raised when a payment line does not belong to the contract."""
    pass


class InvalidContractError(ValidationError):
    """Raised when contract fields are missing or invalid."""
    pass


class DuplicateContractNumberError(ValidationError):
    """Raised when the contract number is already in use."""
    pass
