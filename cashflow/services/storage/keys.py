"""
Storage key layout.

| Key                                   | Value                      |
|---------------------------------------|----------------------------|
| cashflow_transactions[_<userId>]      | list of Transaction        |
| cashflow_budgets[_<userId>]           | list of Budget             |
| cashflow_financial_goals[_<userId>]   | list of FinancialGoal      |
| cashflow_app_version                  | string                     |
| currentUser                           | User, or absent            |
"""

TRANSACTIONS_KEY = "cashflow_transactions"
BUDGETS_KEY = "cashflow_budgets"
FINANCIAL_GOALS_KEY = "cashflow_financial_goals"
APP_VERSION_KEY = "cashflow_app_version"
CURRENT_USER_KEY = "currentUser"

# The per-user collections; these get the user id suffix.
USER_SCOPED_KEYS: tuple[str, ...] = (
    TRANSACTIONS_KEY,
    BUDGETS_KEY,
    FINANCIAL_GOALS_KEY,
)
