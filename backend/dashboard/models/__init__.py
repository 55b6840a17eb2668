"""ORM Models: SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so relationship() string references resolve
      before any query runs
"""

from dashboard.models.customer import Customer  # noqa: F401
from dashboard.models.invoice import Invoice  # noqa: F401
from dashboard.models.user import User  # noqa: F401
