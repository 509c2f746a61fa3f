"""
Settlement service.

Marks a pending debt as paid and moves both parties' balances back by its
amount. A transaction settles at most once.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.db import transaction, OperationalError
from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.groups.models import GroupMembership
from apps.ledger.models import Transaction, TransactionStatus

from .exceptions import (
    TransactionNotFoundError,
    NotTransactionPartyError,
    TransactionAlreadySettledError,
    SettlementPartyMissingError,
    LedgerStoreUnavailableError,
)

logger = logging.getLogger(__name__)


def settle_debt(
    *,
    transaction_id: UUID,
    user: User,
    now: Optional[datetime] = None,
) -> Transaction:
    """
    Settle a pending transaction.

    Either party of the transaction or the group's creator may settle it.

    Raises:
        TransactionNotFoundError: If the transaction doesn't exist
        NotTransactionPartyError: If user may not settle it
        TransactionAlreadySettledError: If it is already paid
        SettlementPartyMissingError: If a party has left the group
        LedgerStoreUnavailableError: If the database could not commit
    """
    try:
        with transaction.atomic():
            return _apply_settlement(transaction_id=transaction_id, user=user, now=now)
    except OperationalError as e:
        logger.warning("Settlement of %s not recorded: %s", transaction_id, e)
        raise LedgerStoreUnavailableError("Ledger is temporarily unavailable, please retry") from e


def _apply_settlement(*, transaction_id, user, now):
    try:
        debt = Transaction.objects.select_for_update().get(id=transaction_id)
    except Transaction.DoesNotExist:
        raise TransactionNotFoundError(f"Transaction with ID {transaction_id} not found")

    allowed = (
        debt.from_user_id == user.id
        or debt.to_user_id == user.id
        or debt.group.is_owner(user)
    )
    if not allowed:
        raise NotTransactionPartyError("Only the parties or the group creator can settle this debt")

    if debt.status == TransactionStatus.PAID:
        raise TransactionAlreadySettledError("Transaction is already settled")

    debtor_rows = GroupMembership.objects.filter(
        group_id=debt.group_id,
        user_id=debt.from_user_id,
    ).update(current_balance=F('current_balance') + debt.amount)
    creditor_rows = GroupMembership.objects.filter(
        group_id=debt.group_id,
        user_id=debt.to_user_id,
    ).update(current_balance=F('current_balance') - debt.amount)

    # Raising here rolls back the balance update that did apply
    if debtor_rows != 1 or creditor_rows != 1:
        raise SettlementPartyMissingError(
            "A party of this transaction is no longer a member of the group"
        )

    debt.status = TransactionStatus.PAID
    debt.settled_at = now or timezone.now()
    debt.settled_by = user
    debt.save(update_fields=['status', 'settled_at', 'settled_by'])

    logger.info(
        "Transaction %s settled by %s (%s from %s to %s)",
        debt.id, user.id, debt.amount, debt.from_user_id, debt.to_user_id
    )
    return debt
