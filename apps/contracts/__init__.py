"""Contracts with farmers and their installment ledger."""
