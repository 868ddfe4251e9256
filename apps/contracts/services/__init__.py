"""
Contracts app services layer.

Contract records and the down / intermediate / final installment ledger.
"""

from .exceptions import (
    ContractNotFoundError,
    PaymentLineNotFoundError,
    InvalidContractError,
    DuplicateContractNumberError,
)

from .contract_management import (
    DEFAULT_CONTRACT_TYPES,
    get_contract_by_id,
    list_contracts,
    get_contract_types,
    create_contract,
    update_contract,
    update_contract_status,
    delete_contract,
)

from .ledger import (
    ordered_lines,
    compute_paid_to_date,
    compute_outstanding,
    lines_settled,
    next_due_payment,
    mark_line_paid,
    schedule_line,
)


__all__ = [
    # Exceptions
    'ContractNotFoundError',
    'PaymentLineNotFoundError',
    'InvalidContractError',
    'DuplicateContractNumberError',

    # Contracts
    'DEFAULT_CONTRACT_TYPES',
    'get_contract_by_id',
    'list_contracts',
    'get_contract_types',
    'create_contract',
    'update_contract',
    'update_contract_status',
    'delete_contract',

    # Ledger
    'ordered_lines',
    'compute_paid_to_date',
    'compute_outstanding',
    'lines_settled',
    'next_due_payment',
    'mark_line_paid',
    'schedule_line',
]
