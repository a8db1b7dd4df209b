"""
Shared module for common utilities used by the REST API, the CLI and tests.

STRUCTURE:
- tableside_shared.security: Authentication and authorization
  - auth.py: Staff JWT and table token verification, require_roles
  - password.py: Bcrypt hashing
  - rate_limit.py: slowapi limiter

- tableside_shared.infrastructure: Database and messaging
  - db.py: SQLAlchemy sessions, safe_commit()
  - redis_pool.py: Async Redis pool for event fan-out
  - correlation.py: X-Request-ID propagation

- tableside_shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Roles, OrderStatus, SelectionType, Limits

- tableside_shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging and stable codes
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from tableside_shared.security.auth import current_user_context
    from tableside_shared.infrastructure.db import get_db, safe_commit
    from tableside_shared.config.settings import settings
    from tableside_shared.config.constants import Roles, OrderStatus
    from tableside_shared.utils.exceptions import NotFoundError, ValidationError
"""
