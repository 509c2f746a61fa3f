import pytest
from django.contrib import admin
from django.test import RequestFactory
from apps.accounts.models import User
from apps.ledger.models import FailureEvent, Transaction
from apps.ledger.services import log_failure


@pytest.fixture
def admin_request(db):
    request = RequestFactory().get('/admin/')
    request.user = User.objects.create_superuser(email='root@example.com', password='RootPass123!')
    return request


@pytest.mark.django_db
class TestLedgerAdmin:
    """Ledger rows are read-only in the admin."""

    def test_failures_and_transactions_cannot_be_deleted(self, admin_request, pact_group, bob):
        result = log_failure(group_id=pact_group.id, user=bob)

        failure_admin = admin.site._registry[FailureEvent]
        transaction_admin = admin.site._registry[Transaction]

        assert failure_admin.has_delete_permission(admin_request, result.failure) is False
        assert transaction_admin.has_delete_permission(admin_request, result.transactions[0]) is False

    def test_nothing_can_be_added(self, admin_request):
        assert admin.site._registry[FailureEvent].has_add_permission(admin_request) is False
        assert admin.site._registry[Transaction].has_add_permission(admin_request) is False
