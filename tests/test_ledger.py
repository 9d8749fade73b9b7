import pytest
from django.db import IntegrityError, transaction

from swaps import ledger, store
from swaps.exceptions import Conflict, Forbidden, InvalidState, NotFound
from swaps.models import Interaction, Notification, SwapRequest


def test_place_request_creates_pending(swap, alice, bob, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        interaction = ledger.place_request(swap.pk, bob.pk, 'Happy to help')
    assert interaction.status == Interaction.PENDING
    assert interaction.message == 'Happy to help'
    assert interaction.decided_at is None
    note = Notification.objects.get(recipient_id=alice.pk)
    assert note.notification_type == 'interaction_placed'
    assert note.swap_request_id == swap.pk


def test_place_on_own_request_is_forbidden(swap, alice, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(Forbidden):
            ledger.place_request(swap.pk, alice.pk)
    assert callbacks == []
    assert not Interaction.objects.exists()


def test_place_twice_conflicts(swap, bob):
    ledger.place_request(swap.pk, bob.pk)
    with pytest.raises(Conflict):
        ledger.place_request(swap.pk, bob.pk)
    assert Interaction.objects.filter(swap_request=swap, requester=bob).count() == 1


def test_place_on_missing_request(bob):
    with pytest.raises(NotFound):
        ledger.place_request(999, bob.pk)


def test_place_by_missing_user(swap):
    with pytest.raises(NotFound):
        ledger.place_request(swap.pk, 99999)
    assert not Interaction.objects.exists()


def test_place_after_approval_is_invalid(in_progress_swap, carol):
    with pytest.raises(InvalidState):
        ledger.place_request(in_progress_swap.pk, carol.pk)
    assert not Interaction.objects.filter(requester=carol).exists()


def test_place_on_cancelled_is_invalid(swap, alice, bob):
    store.cancel(swap.pk, alice.pk)
    with pytest.raises(InvalidState):
        ledger.place_request(swap.pk, bob.pk)


def test_approve(swap, alice, bob, carol, make_user, django_capture_on_commit_callbacks):
    dave = make_user('dave')
    chosen = ledger.place_request(swap.pk, bob.pk)
    other = ledger.place_request(swap.pk, carol.pk)
    third = ledger.place_request(swap.pk, dave.pk)
    ledger.reject(third.pk, alice.pk)

    with django_capture_on_commit_callbacks(execute=True):
        approved = ledger.approve(chosen.pk, alice.pk)

    assert approved.status == Interaction.APPROVED
    assert approved.decided_at is not None
    swap.refresh_from_db()
    assert swap.status == SwapRequest.IN_PROGRESS
    other.refresh_from_db()
    assert other.status == Interaction.REJECTED
    assert other.decided_at is not None
    assert Notification.objects.get(recipient_id=bob.pk).notification_type == 'interaction_approved'
    assert Notification.objects.get(recipient_id=carol.pk).notification_type == 'interaction_rejected'
    assert not Notification.objects.filter(recipient_id=dave.pk).exists()
    assert swap.interactions.filter(status=Interaction.APPROVED).count() == 1


def test_approve_by_other_user_is_forbidden(swap, bob, carol):
    interaction = ledger.place_request(swap.pk, bob.pk)
    with pytest.raises(Forbidden):
        ledger.approve(interaction.pk, carol.pk)
    with pytest.raises(Forbidden):
        ledger.approve(interaction.pk, bob.pk)


def test_reapprove_is_invalid_not_a_second_transition(in_progress_swap, alice, bob):
    interaction = ledger.approved_interaction(in_progress_swap.pk)
    assert interaction.requester_id == bob.pk
    with pytest.raises(InvalidState):
        ledger.approve(interaction.pk, alice.pk)
    in_progress_swap.refresh_from_db()
    assert in_progress_swap.status == SwapRequest.IN_PROGRESS


def test_approve_sibling_after_approval_is_invalid(swap, alice, bob, carol):
    first = ledger.place_request(swap.pk, bob.pk)
    second = ledger.place_request(swap.pk, carol.pk)
    ledger.approve(first.pk, alice.pk)
    with pytest.raises(InvalidState):
        ledger.approve(second.pk, alice.pk)
    assert Interaction.objects.filter(swap_request=swap, status=Interaction.APPROVED).count() == 1


def test_approve_missing_interaction(alice):
    with pytest.raises(NotFound):
        ledger.approve(31337, alice.pk)


def test_reject(swap, alice, bob, django_capture_on_commit_callbacks):
    interaction = ledger.place_request(swap.pk, bob.pk)
    with django_capture_on_commit_callbacks(execute=True):
        rejected = ledger.reject(interaction.pk, alice.pk)
    assert rejected.status == Interaction.REJECTED
    assert rejected.decided_at is not None
    assert Notification.objects.filter(recipient_id=bob.pk, notification_type='interaction_rejected').exists()
    swap.refresh_from_db()
    assert swap.status == SwapRequest.OPEN
    with pytest.raises(InvalidState):
        ledger.reject(interaction.pk, alice.pk)


def test_reject_by_other_user_is_forbidden(swap, bob):
    interaction = ledger.place_request(swap.pk, bob.pk)
    with pytest.raises(Forbidden):
        ledger.reject(interaction.pk, bob.pk)


def test_reapply_after_rejection_allowed_by_default(swap, alice, bob):
    first = ledger.place_request(swap.pk, bob.pk)
    ledger.reject(first.pk, alice.pk)
    second = ledger.place_request(swap.pk, bob.pk)
    assert second.pk != first.pk
    assert second.status == Interaction.PENDING


def test_reapply_after_rejection_can_be_disabled(swap, alice, bob, settings):
    settings.SWAPS = dict(settings.SWAPS, ALLOW_REAPPLY_AFTER_REJECTION=False)
    first = ledger.place_request(swap.pk, bob.pk)
    ledger.reject(first.pk, alice.pk)
    with pytest.raises(Conflict):
        ledger.place_request(swap.pk, bob.pk)


def test_storage_rejects_second_active_interaction(swap, bob):
    Interaction.objects.create(swap_request=swap, requester=bob)
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Interaction.objects.create(swap_request=swap, requester=bob)


def test_storage_rejects_second_approved_interaction(swap, bob, carol):
    Interaction.objects.create(swap_request=swap, requester=bob, status=Interaction.APPROVED)
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Interaction.objects.create(swap_request=swap, requester=carol, status=Interaction.APPROVED)


def test_visibility(swap, make_swap, alice, bob, carol):
    mine = ledger.place_request(swap.pk, bob.pk)
    theirs = ledger.place_request(swap.pk, carol.pk)

    assert set(ledger.for_request(swap.pk, alice.pk)) == {mine, theirs}
    assert list(ledger.for_request(swap.pk, bob.pk)) == [mine]
    assert list(ledger.sent(bob.pk)) == [mine]
    assert set(ledger.received(alice.pk)) == {mine, theirs}
    assert list(ledger.received(alice.pk, Interaction.APPROVED)) == []
    assert list(ledger.received(bob.pk)) == []
