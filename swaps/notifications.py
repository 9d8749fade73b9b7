"""
Fire-and-forget notifications.

``notify`` defers delivery until the surrounding transaction commits, so a
rolled-back operation never sends anything. Delivery errors are logged and
dropped; they never reach the caller.
"""
import logging
from functools import partial

from django.db import transaction
from django.utils.module_loading import import_string

from accounts.directory import Participant

from .conf import swaps_setting
from .models import Notification

logger = logging.getLogger(__name__)


class NotificationSink:
    def deliver(self, recipient, notification_type, message, status, swap_request_id=None):
        raise NotImplementedError


class DatabaseNotificationSink(NotificationSink):
    """Stores notifications so clients can poll them."""

    def deliver(self, recipient, notification_type, message, status, swap_request_id=None):
        Notification.objects.create(
            recipient_kind=recipient.kind,
            recipient_id=recipient.id,
            notification_type=notification_type,
            message=message,
            status=status or '',
            swap_request_id=swap_request_id,
        )


def get_sink():
    return import_string(swaps_setting('NOTIFICATION_SINK'))()


def notify(recipient, notification_type, message, status='', swap_request_id=None):
    if not isinstance(recipient, Participant):
        recipient = Participant.user(recipient)
    transaction.on_commit(partial(_deliver, recipient, notification_type, message, status, swap_request_id))


def _deliver(recipient, notification_type, message, status, swap_request_id):
    try:
        get_sink().deliver(recipient, notification_type, message, status, swap_request_id=swap_request_id)
    except Exception:
        logger.exception("Failed to deliver %s notification to %s %s", notification_type, recipient.kind, recipient.id)


# --- READ SIDE ---
def for_user(user_id):
    return Notification.objects.filter(recipient_kind=Participant.USER, recipient_id=user_id)


def unread_count(user_id):
    return for_user(user_id).filter(is_read=False).count()


def mark_read(user_id, ids=None):
    qs = for_user(user_id).filter(is_read=False)
    if ids is not None:
        qs = qs.filter(id__in=ids)
    return qs.update(is_read=True)
