# campus_social/services/notify.py
import asyncio
import logging
from typing import Optional

from ..db.mongo import notifications_collection
from ..models.notification_model import NotificationModel

logger = logging.getLogger(__name__)


class NotificationDelivery:
    """Pushes a stored notification to the recipient's devices."""

    async def deliver(self, notification: dict) -> None:
        raise NotImplementedError


class LogDelivery(NotificationDelivery):
    # Push/email transports are not implemented; records stay readable in-app
    async def deliver(self, notification: dict) -> None:
        logger.info(
            "notification %s for user %s (%s)",
            notification.get("type"),
            notification.get("recipient_id"),
            notification.get("title"),
        )


_delivery: NotificationDelivery = LogDelivery()
_pending: set = set()


def set_delivery(delivery: NotificationDelivery) -> None:
    global _delivery
    _delivery = delivery


def deliver_bg(notification: dict) -> None:
    """
    Fire-and-forget delivery so the route returns fast.
    Safe to call from controllers after DB writes succeed.
    """
    task = asyncio.get_running_loop().create_task(_delivery.deliver(notification))
    _pending.add(task)
    task.add_done_callback(_finished)


def _finished(task: asyncio.Task) -> None:
    _pending.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("notification delivery failed", exc_info=task.exception())


async def notify(
    recipient_id: str,
    sender_id: Optional[str],
    type: str,
    title: str,
    message: str,
    data: Optional[dict] = None,
) -> Optional[dict]:
    """Stores an in-app notification and schedules delivery. Self-actions are skipped."""
    if sender_id is not None and str(recipient_id) == str(sender_id):
        return None

    doc = NotificationModel(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type,
        title=title,
        message=message,
        data=data or {},
    ).model_dump(exclude={"id"})

    try:
        result = await notifications_collection.insert_one(doc)
    except Exception:
        # The triggering action already committed; a lost notification must not fail it
        logger.exception("could not store %s notification for %s", type, recipient_id)
        return None

    doc["_id"] = result.inserted_id
    deliver_bg(doc)
    return doc


async def drain() -> None:
    """Waits for in-flight deliveries (shutdown and tests)."""
    if _pending:
        await asyncio.gather(*list(_pending), return_exceptions=True)


