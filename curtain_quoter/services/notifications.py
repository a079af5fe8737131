from flask import current_app
from datetime import datetime


def notify_quote_event(quote, action, actor, comment=None):
    """
    Notify about a quote lifecycle event.
    Args:
        quote: quote row (dict)
        action: str (e.g. 'created', 'deleted', 'status_changed')
        actor: SessionContext or identifier
        comment: Optional string
    Behavior:
        - Log a one-line [NOTIFY] event
        - Build a payload for future email integration
        - Never break main flow (catch and log all exceptions)
    """
    try:
        actor_email = getattr(actor, "email", None) or str(actor)
        payload = {
            "quote_id": quote.get("id"),
            "project_name": quote.get("project_name"),
            "customer_name": quote.get("customer_name"),
            "quote_status": quote.get("status"),
            "action": str(action),
            "actor": actor_email,
            "actor_user_id": getattr(actor, "user_id", None),
            "comment": comment,
            "timestamp_utc": datetime.utcnow().isoformat(),
        }
        current_app.logger.info(
            "[NOTIFY] action=%s quote_id=%s actor=%s status=%s",
            payload["action"], payload["quote_id"], payload["actor"], payload["quote_status"]
        )
        return payload
    except Exception as e:
        current_app.logger.exception("[NOTIFY] Notification failed: %s", e)
        return None
