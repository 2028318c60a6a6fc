"""
Shared module for cross-cutting concerns of the REST API.

STRUCTURE:
- shared.infrastructure: Database and request correlation
  - db.py: SQLAlchemy engine/sessions, safe_commit(), transaction_scope()
  - correlation.py: X-Request-ID middleware and logging filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Query keys, limits, domain values, error codes

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - schemas.py: Shared Pydantic schemas (payloads, envelopes)

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import QueryKeys, Limits
    from shared.utils.exceptions import NotFoundError, InvalidFieldError
"""
