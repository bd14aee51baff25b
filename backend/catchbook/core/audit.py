"""
Audit logging for record changes.

Every create, update and delete of a stored record emits one JSON line on
the "audit" logger so the history of the books can be reconstructed
independently of the store.
"""
import logging
import json
from datetime import datetime
from typing import Any, Optional, Dict

# Separate logger for audit events (can be shipped to centralized logging)
audit_logger = logging.getLogger("audit")


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


class AuditLog:
    """Central audit logging for record changes."""

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete"
        resource_type: str,  # "shipment", "expense", "inventory", "document", "grant"
        resource_id: str,
        user_id: Optional[str] = None,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a change to a stored record.

        Usage:
            AuditLog.log_action("create", "shipment", shipment.id, shipment.user_id)
            AuditLog.log_action("update", "inventory", item.id, item.user_id, changes={"current_stock": 4})
        """
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "event_type": f"{resource_type}.{action}",
            "user_id": user_id,
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = {k: _jsonable(v) for k, v in changes.items()}

        audit_logger.info(json.dumps(log_entry, ensure_ascii=False))

    @staticmethod
    def log_analysis(
        kind: str,  # "fish", "receipt", "advice"
        success: bool,
        details: Optional[str] = None,
    ):
        """
        Log a call to the external model.

        Usage:
            AuditLog.log_analysis("receipt", False, details="timeout")
        """
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "event_type": f"analysis.{kind}",
            "success": success,
        }

        if details:
            log_entry["details"] = details

        if success:
            audit_logger.info(json.dumps(log_entry, ensure_ascii=False))
        else:
            audit_logger.warning(json.dumps(log_entry, ensure_ascii=False))
