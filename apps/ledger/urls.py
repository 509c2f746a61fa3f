from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

router = DefaultRouter()
router.register(r'transactions', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # Transaction ViewSet routes
    # GET    /api/ledger/transactions/              - Transactions involving the user
    # GET    /api/ledger/transactions/{id}/         - Transaction details
    # POST   /api/ledger/transactions/{id}/settle/  - Settle a pending transaction
    # GET    /api/ledger/transactions/pending/      - Pending debts and credits

    path('balances/', views.balances, name='balances'),
    path('balances/with/<uuid:user_id>/', views.balance_with_user, name='balance-with-user'),
    path('failures/', views.failure_list, name='failure-list'),

    path('', include(router.urls)),
]
