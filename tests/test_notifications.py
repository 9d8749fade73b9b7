import logging

from django.db import transaction

from accounts.directory import Participant
from swaps import ledger, notifications
from swaps.models import Interaction, Notification
from swaps.notifications import NotificationSink


class ExplodingSink(NotificationSink):
    def deliver(self, recipient, notification_type, message, status, swap_request_id=None):
        raise RuntimeError("mail server down")


def test_notify_is_deferred_until_commit(alice, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=False) as callbacks:
        notifications.notify(alice.pk, 'interaction_placed', 'hello', 'pending')
    assert len(callbacks) == 1
    assert not Notification.objects.exists()
    callbacks[0]()
    note = Notification.objects.get()
    assert (note.recipient_kind, note.recipient_id) == (Participant.USER, alice.pk)
    assert note.status == 'pending'


def test_rolled_back_operation_sends_nothing(alice, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        try:
            with transaction.atomic():
                notifications.notify(alice.pk, 'interaction_placed', 'hello', 'pending')
                raise RuntimeError("abort")
        except RuntimeError:
            pass
    assert callbacks == []
    assert not Notification.objects.exists()


def test_organization_recipient(acme, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        notifications.notify(Participant.organization(acme.pk), 'swap_completed', 'done', 'completed')
    note = Notification.objects.get()
    assert note.recipient_kind == Participant.ORGANIZATION
    assert note.recipient_id == acme.pk
    assert notifications.unread_count(acme.pk) == 0


def test_delivery_failure_is_logged_and_swallowed(swap, bob, settings, caplog, django_capture_on_commit_callbacks):
    settings.SWAPS = dict(settings.SWAPS, NOTIFICATION_SINK='tests.test_notifications.ExplodingSink')
    with caplog.at_level(logging.ERROR, logger='swaps.notifications'):
        with django_capture_on_commit_callbacks(execute=True):
            interaction = ledger.place_request(swap.pk, bob.pk)
    assert Interaction.objects.filter(pk=interaction.pk, status=Interaction.PENDING).exists()
    assert "Failed to deliver interaction_placed notification" in caplog.text
    assert not Notification.objects.exists()


def test_read_side(alice, bob, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        for i in range(3):
            notifications.notify(alice.pk, 'progress_update', f'update {i}', 'in_progress')
        notifications.notify(bob.pk, 'progress_update', 'for bob', 'in_progress')

    assert notifications.unread_count(alice.pk) == 3
    assert notifications.mark_read(alice.pk, []) == 0
    newest = notifications.for_user(alice.pk).first()
    assert newest.message == 'update 2'

    assert notifications.mark_read(alice.pk, [newest.pk]) == 1
    assert notifications.unread_count(alice.pk) == 2
    assert notifications.mark_read(alice.pk) == 2
    assert notifications.unread_count(alice.pk) == 0
    assert notifications.unread_count(bob.pk) == 1
