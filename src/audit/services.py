"""Write audit entries without letting audit failures break the caller."""

import logging
from typing import Any, Mapping

from django.db import DatabaseError, transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def log_action(
    member,
    action_type: str,
    table_name: str,
    record_id: Any = None,
    old_values: Mapping[str, Any] | None = None,
    new_values: Mapping[str, Any] | None = None,
    request=None,
) -> AuditLog | None:
    """Record who changed what.

    The mutation being audited has already been committed; a failed audit
    write is logged and reported as None.
    """
    ip_address = None
    user_agent = ""
    if request is not None:
        meta = getattr(request, "META", {})
        ip_address = meta.get("REMOTE_ADDR") or None
        user_agent = meta.get("HTTP_USER_AGENT", "")

    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                member=member,
                action_type=action_type,
                table_name=table_name,
                record_id="" if record_id is None else str(record_id),
                old_values=dict(old_values) if old_values is not None else None,
                new_values=dict(new_values) if new_values is not None else None,
                ip_address=ip_address,
                user_agent=user_agent,
            )
    except DatabaseError:
        logger.exception("Failed to write audit log for %s %s:%s", action_type, table_name, record_id)
        return None


__all__ = ["log_action"]
