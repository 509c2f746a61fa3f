import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command
from django.core.management.base import CommandError
from apps.groups.models import GroupMembership
from apps.ledger.services import log_failure, settle_debt


@pytest.mark.django_db
class TestCheckLedgerCommand:
    """Tests for `manage.py check_ledger`."""

    def test_balanced_ledger(self, pact_group, alice, bob):
        result = log_failure(group_id=pact_group.id, user=alice)
        settle_debt(transaction_id=result.transactions[0].id, user=alice)

        out = StringIO()
        call_command('check_ledger', stdout=out)

        assert 'Ledger is balanced' in out.getvalue()

    def test_drifted_balance_fails(self, pact_group, alice, bob):
        log_failure(group_id=pact_group.id, user=alice)
        GroupMembership.objects.filter(group=pact_group, user=bob).update(current_balance=Decimal('3.00'))

        out = StringIO()
        with pytest.raises(CommandError, match='1 group'):
            call_command('check_ledger', '--group', str(pact_group.id), stdout=out)

        assert 'bob@example.com' in out.getvalue()

    def test_other_group_is_ignored(self, pact_group, solo_group, alice, bob):
        GroupMembership.objects.filter(group=pact_group, user=bob).update(current_balance=Decimal('3.00'))

        out = StringIO()
        call_command('check_ledger', '--group', str(solo_group.id), stdout=out)

        assert 'Ledger is balanced' in out.getvalue()

    def test_invalid_group_id(self, pact_group):
        with pytest.raises(CommandError, match='not a valid group ID'):
            call_command('check_ledger', '--group', 'not-a-uuid', stdout=StringIO())
