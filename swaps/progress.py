import logging

from django.db import transaction

from .exceptions import Forbidden, InvalidState, NotFound, ValidationError
from .models import ProgressUpdate, SwapRequest
from .notifications import notify

logger = logging.getLogger(__name__)


def _participants(request_id, lock=False):
    qs = SwapRequest.objects.select_for_update() if lock else SwapRequest.objects
    try:
        swap = qs.get(pk=request_id)
    except SwapRequest.DoesNotExist:
        raise NotFound(f"Swap request {request_id} not found")
    return (swap,) + swap.participant_ids()


def post_update(request_id, author_id, title, message, percentage):
    """Append a progress entry for the owner or the approved partner of an in-progress swap."""
    with transaction.atomic():
        swap, owner_id, partner_id = _participants(request_id, lock=True)
        if author_id not in (owner_id, partner_id):
            raise Forbidden("Only the owner or the approved partner can post progress.")
        if swap.status != SwapRequest.IN_PROGRESS:
            raise InvalidState(f"Progress can only be posted while in progress (status: {swap.status}).")
        if isinstance(percentage, bool) or not isinstance(percentage, int) or not 0 <= percentage <= 100:
            raise ValidationError({'percentage': ['Must be an integer between 0 and 100.']})

        update = ProgressUpdate.objects.create(
            swap_request=swap, author_id=author_id,
            title=title or '', message=message or '', percentage=percentage,
        )
        other = partner_id if author_id == owner_id else owner_id
        notify(other, 'progress_update',
               f"New progress on '{swap.service_title}': {percentage}%", swap.status, swap.pk)
    logger.info("Progress %s%% posted on swap request %s by user %s", percentage, request_id, author_id)
    return update


def latest_percentage(request_id, participant_id):
    latest = (ProgressUpdate.objects
              .filter(swap_request_id=request_id, author_id=participant_id)
              .order_by('-created_at', '-id')
              .values_list('percentage', flat=True)
              .first())
    return latest if latest is not None else 0


def timeline(request_id, actor_id):
    swap, owner_id, partner_id = _participants(request_id)
    if actor_id not in (owner_id, partner_id):
        raise Forbidden("Only the swap participants can view its progress.")
    return swap.progress_updates.select_related('author').order_by('created_at', 'id')
