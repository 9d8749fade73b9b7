import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F

from .exceptions import Conflict, Forbidden, InvalidState, NotFound, ValidationError
from .models import Review, SwapRequest
from .notifications import notify

logger = logging.getLogger(__name__)

POSITIVE_RATING = 4


def leave_review(request_id, reviewer_id, rating, comment=''):
    """Rate the other participant of a completed swap. One review per reviewer per swap."""
    with transaction.atomic():
        try:
            swap = SwapRequest.objects.select_for_update().get(pk=request_id)
        except SwapRequest.DoesNotExist:
            raise NotFound(f"Swap request {request_id} not found")
        owner_id, partner_id = swap.participant_ids()
        if reviewer_id not in (owner_id, partner_id):
            raise Forbidden("Only the swap participants can review each other.")
        if swap.status != SwapRequest.COMPLETED:
            raise InvalidState("Reviews can only be left on completed swaps.")
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError({'rating': ['Must be an integer between 1 and 5.']})
        if swap.reviews.filter(reviewer_id=reviewer_id).exists():
            raise Conflict("You already reviewed this swap.")

        target_id = partner_id if reviewer_id == owner_id else owner_id
        try:
            with transaction.atomic():
                review = Review.objects.create(swap_request=swap, reviewer_id=reviewer_id,
                                               target_user_id=target_id, rating=rating, comment=comment or '')
        except IntegrityError:
            raise Conflict("You already reviewed this swap.")
        if rating >= POSITIVE_RATING:
            get_user_model().objects.filter(pk=target_id).update(
                positive_reviews_count=F('positive_reviews_count') + 1)
        notify(target_id, 'review_received',
               f"You received a {rating}/5 review for '{swap.service_title}'", swap.status, swap.pk)
    logger.info("Review %s left on swap request %s by user %s", review.pk, request_id, reviewer_id)
    return review


def reviews_for(user_id):
    return Review.objects.filter(target_user_id=user_id).select_related('reviewer', 'swap_request')
