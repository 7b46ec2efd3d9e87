"""Session Record — serialization of the durable session slot.

Invariants:
    - Persisted layout is {"user": {"id": ..., "email": ...}}
    - session_to_record / session_from_record round-trip exactly
    - session_from_record NEVER raises: anything malformed reads as "no session"

Design Decisions:
    - Pure functions (no IO): the Session Manager owns the store access
"""

import json
import logging

from subsflow.core.domain_types import AccountId
from subsflow.core.entities import Session

logger = logging.getLogger(__name__)


def session_to_record(session: Session) -> str:
    """Serialize a session to the JSON text stored under the session key."""
    return json.dumps(
        {"user": {"id": session.account_id, "email": session.email}},
    )


def session_from_record(raw: str | None) -> Session | None:
    """Parse stored JSON text. Returns None for absent or malformed data."""
    if raw is None:
        return None
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Discarding unparseable session record: {e}")
        return None

    user = payload.get("user") if isinstance(payload, dict) else None
    if not isinstance(user, dict):
        logger.warning("Discarding session record without a user object")
        return None

    account_id = user.get("id")
    email = user.get("email")
    if not isinstance(account_id, str) or not account_id:
        logger.warning("Discarding session record without a user id")
        return None

    return Session(
        account_id=AccountId(account_id),
        email=email if isinstance(email, str) else "",
    )
