"""
Placed requests ("interactions") against swap requests.

A request has at most one approved interaction, and a requester has at most
one pending or approved interaction per request. Both rules are checked under
the swap request row lock and backed by unique constraints.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from . import store
from .conf import swaps_setting
from .exceptions import Conflict, Forbidden, InvalidState, NotFound
from .models import Interaction, SwapRequest
from .notifications import notify

logger = logging.getLogger(__name__)


def get(interaction_id):
    try:
        return Interaction.objects.select_related('swap_request', 'requester').get(pk=interaction_id)
    except Interaction.DoesNotExist:
        raise NotFound(f"Interaction {interaction_id} not found")


def place_request(request_id, requester_id, message=''):
    requester = get_user_model().objects.filter(pk=requester_id).first()
    if requester is None:
        raise NotFound(f"User {requester_id} not found")
    with transaction.atomic():
        swap = store.locked_request(request_id)
        if swap.owner_id == requester_id:
            raise Forbidden("You cannot place a request on your own swap request.")
        if swap.status != SwapRequest.OPEN:
            raise InvalidState(f"Swap request is {swap.status}, it no longer accepts requests.")

        previous = swap.interactions.filter(requester_id=requester_id)
        if previous.filter(status__in=Interaction.ACTIVE_STATUSES).exists():
            raise Conflict("You already have an active request on this swap.")
        if (not swaps_setting('ALLOW_REAPPLY_AFTER_REJECTION')
                and previous.filter(status=Interaction.REJECTED).exists()):
            raise Conflict("Your earlier request on this swap was rejected.")

        try:
            with transaction.atomic():
                interaction = Interaction.objects.create(
                    swap_request=swap, requester_id=requester_id, message=message or '')
        except IntegrityError:
            raise Conflict("You already have an active request on this swap.")

        notify(swap.owner_id, 'interaction_placed',
               f"{requester.username} placed a request on '{swap.service_title}'",
               Interaction.PENDING, swap.pk)
    logger.info("Interaction %s placed on swap request %s by user %s", interaction.pk, swap.pk, requester_id)
    return interaction


def _decide(interaction_id, actor_id):
    """Lock the parent request and check the actor may decide on the interaction."""
    interaction = get(interaction_id)
    swap = store.locked_request(interaction.swap_request_id)
    if swap.owner_id != actor_id:
        raise Forbidden("Only the swap request owner can decide on requests.")
    # re-read after taking the lock
    interaction.refresh_from_db(fields=['status', 'decided_at'])
    if interaction.status != Interaction.PENDING:
        raise InvalidState(f"Interaction is already {interaction.status}.")
    return swap, interaction


def approve(interaction_id, actor_id):
    with transaction.atomic():
        swap, interaction = _decide(interaction_id, actor_id)
        if swap.interactions.filter(status=Interaction.APPROVED).exists():
            raise InvalidState("Another request on this swap is already approved.")
        if swap.status != SwapRequest.OPEN:
            raise InvalidState(f"Swap request is {swap.status}, it can no longer be approved.")

        now = timezone.now()
        interaction.status = Interaction.APPROVED
        interaction.decided_at = now
        try:
            with transaction.atomic():
                interaction.save(update_fields=['status', 'decided_at'])
        except IntegrityError:
            raise Conflict("Another request on this swap was approved concurrently.")
        store.transition_to_in_progress(swap.pk)

        # one partner per swap: everybody else still waiting is turned down
        siblings = swap.interactions.filter(status=Interaction.PENDING).exclude(pk=interaction.pk)
        for sibling in siblings:
            sibling.status = Interaction.REJECTED
            sibling.decided_at = now
            sibling.save(update_fields=['status', 'decided_at'])
            notify(sibling.requester_id, 'interaction_rejected',
                   f"Your request on '{swap.service_title}' was declined, another partner was chosen.",
                   Interaction.REJECTED, swap.pk)

        notify(interaction.requester_id, 'interaction_approved',
               f"Your request on '{swap.service_title}' was approved.",
               Interaction.APPROVED, swap.pk)
    logger.info("Interaction %s approved on swap request %s", interaction.pk, swap.pk)
    return interaction


def reject(interaction_id, actor_id):
    with transaction.atomic():
        swap, interaction = _decide(interaction_id, actor_id)
        interaction.status = Interaction.REJECTED
        interaction.decided_at = timezone.now()
        interaction.save(update_fields=['status', 'decided_at'])
        notify(interaction.requester_id, 'interaction_rejected',
               f"Your request on '{swap.service_title}' was declined.",
               Interaction.REJECTED, swap.pk)
    logger.info("Interaction %s rejected on swap request %s", interaction.pk, swap.pk)
    return interaction


# --- QUERIES ---
def approved_interaction(request_id):
    return store.get(request_id).approved_interaction()


def for_request(request_id, actor_id):
    swap = store.get(request_id)
    qs = swap.interactions.select_related('requester')
    if swap.owner_id == actor_id:
        return qs
    return qs.filter(requester_id=actor_id)


def sent(user_id):
    return Interaction.objects.filter(requester_id=user_id).select_related('swap_request', 'swap_request__owner')


def received(user_id, status=None):
    qs = Interaction.objects.filter(swap_request__owner_id=user_id).select_related('swap_request', 'requester')
    if status:
        qs = qs.filter(status=status)
    return qs
