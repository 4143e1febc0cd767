"""
Shared module for common utilities across the REST API and the WS Gateway.

STRUCTURE:
- shared.security: Authentication, authorization, rate limiting
  - auth.py: JWT verification, current_user_context, role guards
  - password.py: Bcrypt hashing
  - rate_limit.py: slowapi limiter and 429 handler

- shared.infrastructure: Database and messaging
  - db.py: SQLAlchemy sessions, safe_commit()
  - events/: Redis pub/sub, fire-and-forget emit()
  - correlation.py: X-Request-ID middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Roles, statuses, action names

- shared.i18n: Message catalogs with tiered fallback

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input sanitization
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from shared.security.auth import current_user_context, role_guard
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import Roles, OrderItemStatus
    from shared.utils.exceptions import NotFoundError, ValidationError
"""
