"""
Shared module for configuration, security and infrastructure.

STRUCTURE:
- ordo_shared.config: settings.py (pydantic-settings), logging.py (structured
  logging), constants.py (roles, statuses, transition tables)
- ordo_shared.infrastructure: db.py (SQLAlchemy sessions, safe_commit),
  correlation.py (X-Request-ID middleware and log filter)
- ordo_shared.security: auth.py (JWT), password.py (bcrypt),
  rate_limit.py (slowapi)
- ordo_shared.utils: exceptions.py (HTTP exceptions with error codes),
  schemas.py (pydantic schemas), validators.py, clock.py

IMPORT EXAMPLES:
    from ordo_shared.infrastructure.db import get_db, safe_commit
    from ordo_shared.config.settings import settings
    from ordo_shared.config.constants import Roles, OrderStatus
    from ordo_shared.utils.exceptions import NotFoundError, ForbiddenError
"""
