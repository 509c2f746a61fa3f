"""
Ledger services - Business logic layer.

Usage:
    from apps.ledger.services import log_failure, settle_debt
"""

from .penalty_distribution import log_failure, FailureResult
from .settlement import settle_debt
from .balances import (
    GroupBalance,
    get_net_balance,
    get_group_balances,
    get_pending_debts,
    get_pending_credits,
    get_balance_with_user,
    get_user_transactions,
    get_shame_leaderboard,
    get_group_failures,
    find_unbalanced_groups,
)
from .exceptions import (
    LedgerServiceError,
    TransactionNotFoundError,
    NotTransactionPartyError,
    TransactionAlreadySettledError,
    SettlementPartyMissingError,
    LedgerStoreUnavailableError,
)

__all__ = [
    # Penalty distribution
    'log_failure',
    'FailureResult',
    # Settlement
    'settle_debt',
    # Balances
    'GroupBalance',
    'get_net_balance',
    'get_group_balances',
    'get_pending_debts',
    'get_pending_credits',
    'get_balance_with_user',
    'get_user_transactions',
    'get_shame_leaderboard',
    'get_group_failures',
    'find_unbalanced_groups',
    # Exceptions
    'LedgerServiceError',
    'TransactionNotFoundError',
    'NotTransactionPartyError',
    'TransactionAlreadySettledError',
    'SettlementPartyMissingError',
    'LedgerStoreUnavailableError',
]
