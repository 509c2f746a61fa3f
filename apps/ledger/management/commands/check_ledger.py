"""
Management command to verify ledger consistency.

Checks that every group's member balances sum to zero and that each
member's balance equals their pending credits minus pending debts.

Usage:
    python manage.py check_ledger
    python manage.py check_ledger --group <uuid>
"""

import uuid
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db.models import Sum

from apps.groups.models import GroupMembership
from apps.ledger.models import Transaction, TransactionStatus
from apps.ledger.services import find_unbalanced_groups


class Command(BaseCommand):
    help = 'Verify that group balances sum to zero and match pending transactions'

    def add_arguments(self, parser):
        parser.add_argument(
            '--group',
            help='Only check the group with this ID',
        )

    def handle(self, *args, **options):
        group_id = options.get('group')
        if group_id:
            try:
                group_id = uuid.UUID(group_id)
            except ValueError:
                raise CommandError(f"'{group_id}' is not a valid group ID")

        unbalanced = find_unbalanced_groups(group_id=group_id)
        for gid, total in unbalanced.items():
            self.stdout.write(
                self.style.ERROR(f'  - Group {gid}: balances sum to {total}')
            )

        mismatched = self._mismatched_members(group_id)
        for membership, expected in mismatched:
            self.stdout.write(
                self.style.ERROR(
                    f'  - {membership.user.email} in {membership.group.name}: '
                    f'balance {membership.current_balance}, pending transactions say {expected}'
                )
            )

        if unbalanced or mismatched:
            raise CommandError(
                f'Ledger drift found: {len(unbalanced)} group(s), {len(mismatched)} member(s)'
            )

        self.stdout.write(self.style.SUCCESS('Ledger is balanced. All good!'))

    def _mismatched_members(self, group_id):
        memberships = GroupMembership.objects.select_related('user', 'group')
        if group_id:
            memberships = memberships.filter(group_id=group_id)

        pending = Transaction.objects.filter(status=TransactionStatus.PENDING)
        mismatched = []
        for membership in memberships:
            in_group = pending.filter(group_id=membership.group_id)
            credits = in_group.filter(to_user_id=membership.user_id).aggregate(
                total=Sum('amount'))['total'] or Decimal('0.00')
            debts = in_group.filter(from_user_id=membership.user_id).aggregate(
                total=Sum('amount'))['total'] or Decimal('0.00')
            expected = credits - debts
            if membership.current_balance != expected:
                mismatched.append((membership, expected))
        return mismatched
