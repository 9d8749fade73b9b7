"""
Swap request storage and lifecycle.

Status only moves along::

    open -> in_progress -> completed
    open -> cancelled
    in_progress -> cancelled

Every mutation runs in a transaction holding the request row lock.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, Prefetch
from django.utils import timezone

from accounts.directory import Participant

from .exceptions import Conflict, Forbidden, InvalidState, NotFound, PreconditionFailed
from .models import Interaction, SwapRequest
from .notifications import notify
from .progress import latest_percentage
from .serializers import SwapRequestInputSerializer

logger = logging.getLogger(__name__)


def get(request_id):
    try:
        return SwapRequest.objects.select_related('owner').get(pk=request_id)
    except SwapRequest.DoesNotExist:
        raise NotFound(f"Swap request {request_id} not found")


def locked_request(request_id):
    """Fetch a swap request with a row lock. Must be called inside ``transaction.atomic``."""
    try:
        return SwapRequest.objects.select_for_update().get(pk=request_id)
    except SwapRequest.DoesNotExist:
        raise NotFound(f"Swap request {request_id} not found")


def create(owner_id, fields):
    if not get_user_model().objects.filter(pk=owner_id).exists():
        raise NotFound(f"User {owner_id} not found")
    serializer = SwapRequestInputSerializer(data=fields)
    serializer.is_valid(raise_exception=True)
    swap = serializer.save(owner_id=owner_id, status=SwapRequest.OPEN)
    logger.info("Swap request %s created by user %s", swap.pk, owner_id)
    return swap


def edit(request_id, actor_id, fields):
    with transaction.atomic():
        swap = locked_request(request_id)
        if swap.owner_id != actor_id:
            raise Forbidden("Only the owner can edit this swap request.")
        if swap.status != SwapRequest.OPEN:
            raise InvalidState(f"Swap request can only be edited while open (status: {swap.status}).")
        serializer = SwapRequestInputSerializer(swap, data=fields, partial=True)
        serializer.is_valid(raise_exception=True)
        return serializer.save()


def transition_to_in_progress(request_id):
    # compare-and-swap on status so a concurrent transition loses cleanly
    updated = SwapRequest.objects.filter(pk=request_id, status=SwapRequest.OPEN).update(
        status=SwapRequest.IN_PROGRESS, updated_at=timezone.now())
    if not updated:
        swap = get(request_id)
        raise InvalidState(f"Swap request is {swap.status}, expected open.")
    logger.info("Swap request %s is now in progress", request_id)
    return get(request_id)


def transition_to_completed(request_id, actor_id=None):
    with transaction.atomic():
        swap = locked_request(request_id)
        owner_id, partner_id = swap.participant_ids()
        if actor_id is not None and actor_id not in (owner_id, partner_id):
            raise Forbidden("Only the swap participants can complete it.")
        if swap.status != SwapRequest.IN_PROGRESS or partner_id is None:
            raise PreconditionFailed(f"Swap request is {swap.status}, it must be in progress to complete.")

        # read under the lock so a stale 100% cannot slip through
        owner_pct = latest_percentage(swap.pk, owner_id)
        partner_pct = latest_percentage(swap.pk, partner_id)
        if owner_pct != 100 or partner_pct != 100:
            raise PreconditionFailed(
                f"Both participants must report 100% (owner: {owner_pct}%, partner: {partner_pct}%).")

        swap.status = SwapRequest.COMPLETED
        swap.save(update_fields=['status', 'updated_at'])
        get_user_model().objects.filter(pk__in=[owner_id, partner_id]).update(
            completed_swaps_count=F('completed_swaps_count') + 1)

        message = f"Swap '{swap.service_title}' has been completed."
        for user_id in (owner_id, partner_id):
            notify(user_id, 'swap_completed', message, SwapRequest.COMPLETED, swap.pk)
        organization_id = swap.owner.organization_id
        if organization_id:
            notify(Participant.organization(organization_id), 'swap_completed',
                   f"{swap.owner.username} completed the swap '{swap.service_title}'.",
                   SwapRequest.COMPLETED, swap.pk)
    logger.info("Swap request %s completed", swap.pk)
    return swap


def cancel(request_id, actor_id):
    with transaction.atomic():
        swap = locked_request(request_id)
        if swap.owner_id != actor_id:
            raise Forbidden("Only the owner can cancel this swap request.")
        if swap.status not in (SwapRequest.OPEN, SwapRequest.IN_PROGRESS):
            raise InvalidState(f"Swap request is already {swap.status}.")

        swap.status = SwapRequest.CANCELLED
        swap.save(update_fields=['status', 'updated_at'])

        now = timezone.now()
        for interaction in swap.interactions.filter(status__in=Interaction.ACTIVE_STATUSES):
            interaction.status = Interaction.REJECTED
            interaction.decided_at = now
            interaction.save(update_fields=['status', 'decided_at'])
            notify(interaction.requester_id, 'swap_cancelled',
                   f"The swap '{swap.service_title}' was cancelled by its owner.",
                   Interaction.REJECTED, swap.pk)
    logger.info("Swap request %s cancelled by user %s", swap.pk, actor_id)
    return swap


def delete(request_id, actor_id):
    with transaction.atomic():
        swap = locked_request(request_id)
        if swap.owner_id != actor_id:
            raise Forbidden("Only the owner can delete this swap request.")
        if swap.status != SwapRequest.OPEN or swap.interactions.exists():
            raise Conflict("Swap request has activity, cancel it instead.")
        swap.delete()
    logger.info("Swap request %s deleted by user %s", request_id, actor_id)


# --- LISTINGS ---
def general_listing(viewer_id=None, owner_id=None):
    """Unranked listing, newest first. With ``owner_id`` returns that user's requests in any status."""
    qs = SwapRequest.objects.select_related('owner').prefetch_related('service_categories')
    if owner_id is not None:
        return qs.filter(owner_id=owner_id)
    qs = qs.filter(status=SwapRequest.OPEN, owner__is_active=True)
    if viewer_id is not None:
        qs = qs.exclude(owner_id=viewer_id)
    return qs


def organization_swaps(organization_id):
    """All swap requests owned by members of an organization, paired with the approved partner."""
    approved = Prefetch('interactions',
                        queryset=Interaction.objects.filter(status=Interaction.APPROVED).select_related('requester'),
                        to_attr='approved_list')
    qs = (SwapRequest.objects.filter(owner__organization_id=organization_id)
          .select_related('owner').prefetch_related('service_categories', approved))
    return [(swap, swap.approved_list[0].requester if swap.approved_list else None) for swap in qs]
