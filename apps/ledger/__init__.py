"""
Ledger App - Penalty Distribution and Settlement

Every failure a member logs in a group becomes one pending debt per other
member, and each member's running balance is kept so that a group's
balances always sum to zero. Settling a debt reverses its balance effect
exactly once.

Architecture:
- Models: FailureEvent, Transaction
- Services: log_failure, settle_debt, balance aggregation
- Views: RESTful API with ViewSets
"""
