import pytest

from swaps import ledger, progress
from swaps.exceptions import Forbidden, InvalidState, NotFound, ValidationError
from swaps.models import Interaction, Notification, ProgressUpdate


def test_latest_percentage_defaults_to_zero(in_progress_swap, alice):
    assert progress.latest_percentage(in_progress_swap.pk, alice.pk) == 0


def test_post_and_latest(in_progress_swap, alice, bob):
    progress.post_update(in_progress_swap.pk, alice.pk, 'Kickoff', 'Sketches ready', 20)
    progress.post_update(in_progress_swap.pk, alice.pk, 'Drafts', '', 60)
    progress.post_update(in_progress_swap.pk, bob.pk, 'Outline', '', 35)
    assert progress.latest_percentage(in_progress_swap.pk, alice.pk) == 60
    assert progress.latest_percentage(in_progress_swap.pk, bob.pk) == 35


def test_updates_are_appended(in_progress_swap, alice):
    first = progress.post_update(in_progress_swap.pk, alice.pk, 'One', '', 50)
    progress.post_update(in_progress_swap.pk, alice.pk, 'Two', '', 40)
    first.refresh_from_db()
    assert first.percentage == 50
    assert ProgressUpdate.objects.filter(swap_request=in_progress_swap).count() == 2
    # latest wins even when it goes down
    assert progress.latest_percentage(in_progress_swap.pk, alice.pk) == 40


def test_outsider_cannot_post(in_progress_swap, carol):
    with pytest.raises(Forbidden):
        progress.post_update(in_progress_swap.pk, carol.pk, 'Hi', '', 10)


def test_rejected_requester_cannot_post(in_progress_swap, make_user):
    loser = make_user('loser')
    Interaction.objects.create(swap_request=in_progress_swap, requester=loser, status=Interaction.REJECTED)
    assert ledger.approved_interaction(in_progress_swap.pk).requester_id != loser.pk
    with pytest.raises(Forbidden):
        progress.post_update(in_progress_swap.pk, loser.pk, 'Hi', '', 10)


def test_post_requires_in_progress(swap, alice):
    with pytest.raises(InvalidState):
        progress.post_update(swap.pk, alice.pk, 'Early', '', 10)


@pytest.mark.parametrize('percentage', [-1, 101, 55.5, '50', True])
def test_percentage_must_be_in_range(in_progress_swap, alice, percentage):
    with pytest.raises(ValidationError):
        progress.post_update(in_progress_swap.pk, alice.pk, 'Bad', '', percentage)
    assert not ProgressUpdate.objects.exists()


@pytest.mark.parametrize('percentage', [0, 100])
def test_percentage_bounds_are_inclusive(in_progress_swap, bob, percentage):
    update = progress.post_update(in_progress_swap.pk, bob.pk, 'Edge', '', percentage)
    assert update.percentage == percentage


def test_post_notifies_other_participant(in_progress_swap, alice, bob, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        progress.post_update(in_progress_swap.pk, bob.pk, 'Half way', '', 50)
    note = Notification.objects.get(notification_type='progress_update')
    assert note.recipient_id == alice.pk
    assert '50%' in note.message


def test_timeline(in_progress_swap, alice, bob, carol):
    progress.post_update(in_progress_swap.pk, alice.pk, 'A', '', 10)
    progress.post_update(in_progress_swap.pk, bob.pk, 'B', '', 20)
    assert [u.title for u in progress.timeline(in_progress_swap.pk, bob.pk)] == ['A', 'B']
    with pytest.raises(Forbidden):
        progress.timeline(in_progress_swap.pk, carol.pk)


def test_missing_request(alice):
    with pytest.raises(NotFound):
        progress.post_update(404, alice.pk, 'x', '', 10)
