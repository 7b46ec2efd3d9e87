"""ORM Models — SQLAlchemy declarative models for persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Rows are converted to core entities at the repository boundary (infrastructure/sql_store.py)

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all
"""

from subsflow.models.account import AccountRow  # noqa: F401
from subsflow.models.plan import PlanRow  # noqa: F401
from subsflow.models.subscription import SubscriptionRow  # noqa: F401
from subsflow.models.document import DocumentRow  # noqa: F401
