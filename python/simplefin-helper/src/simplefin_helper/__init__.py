r"""Retrieve account and transaction data from a SimpleFIN server.

## Usage

```python
from datetime import date
from simplefin_helper import SimpleFIN, parse_account_set

simplefin = SimpleFIN()

# Claim an access key once, then keep it somewhere safe.
access_key = await simplefin.get_access_key(setup_token)

# Get transactions for a date range; omit the dates for the current month.
account_set = parse_account_set(
    await simplefin.get_transactions(access_key, date(2024, 1, 1), date(2024, 2, 1))
)

for a in account_set.accounts:
    for t in a.transactions:
        print(f"{a.name}\t{t.posted}\t${t.amount}\t{t.description}")
```
See `python/simplefin-example/simplefin_example.py` for a working example.
"""  # noqa: E501

from .config import SimpleFINConfig, load_config
from .log import configure_logging
from .simplefin import (
    Credential,
    SimpleFIN,
    SimpleFINError,
    get_access_key,
    get_accounts,
    get_transactions,
    month_bounds,
    normalize_date,
    parse_access_key,
)
from .simplefin_models import (
    AccountModel,
    AccountSetModel,
    OrganizationModel,
    TransactionModel,
    parse_account_set,
)


__all__ = [  # noqa: RUF022
    "SimpleFIN",
    "SimpleFINError",
    "Credential",
    "parse_access_key",
    "get_access_key",
    "get_accounts",
    "get_transactions",
    "normalize_date",
    "month_bounds",
    "AccountSetModel",
    "AccountModel",
    "OrganizationModel",
    "TransactionModel",
    "parse_account_set",
    "SimpleFINConfig",
    "load_config",
    "configure_logging",
]
