"""
Ranks open swap requests for a user.

A request scores on three criteria, compared in this order:

1. how many of its categories the user also belongs to,
2. whether ``service_required`` matches one of the user's skills
   (equal, or one contains the other, case-insensitive; the contained
   term must be at least MIN_CONTAINED_LENGTH characters),
3. whether ``preferred_location`` is the user's city.

The weights keep the comparison lexicographic: one shared category always
outranks a skill match plus a location match. Requests scoring zero are left
out. Ties go to the most recently created request.
"""
import heapq
from collections import namedtuple
from functools import cached_property

from accounts.directory import get_profile

from .exceptions import ValidationError
from .models import SwapRequest

CATEGORY_WEIGHT = 100
SKILL_WEIGHT = 10
LOCATION_WEIGHT = 1

MIN_CONTAINED_LENGTH = 3


class Score(namedtuple('Score', 'categories skill location')):
    __slots__ = ()

    @property
    def total(self):
        return self.categories * CATEGORY_WEIGHT + self.skill * SKILL_WEIGHT + self.location * LOCATION_WEIGHT


Recommendation = namedtuple('Recommendation', 'swap_request score')


def _norm(value):
    return (value or '').strip().casefold()


def skill_matches(service_required, skills):
    needle = _norm(service_required)
    if not needle:
        return False
    for skill in skills:
        skill = _norm(skill)
        if not skill:
            continue
        if skill == needle:
            return True
        shorter, longer = sorted((skill, needle), key=len)
        if len(shorter) >= MIN_CONTAINED_LENGTH and shorter in longer:
            return True
    return False


def location_matches(preferred_location, city):
    preferred_location, city = _norm(preferred_location), _norm(city)
    return bool(preferred_location) and preferred_location == city


def score(swap_request, profile):
    categories = {c.pk for c in swap_request.service_categories.all()}
    return Score(
        categories=len(categories & profile.categories),
        skill=int(skill_matches(swap_request.service_required, profile.skills)),
        location=int(location_matches(swap_request.preferred_location, profile.city)),
    )


def candidates(user_id):
    """Open requests the user could still place a request on."""
    return (SwapRequest.objects
            .filter(status=SwapRequest.OPEN, owner__is_active=True)
            .exclude(owner_id=user_id)
            .exclude(interactions__requester_id=user_id)
            .select_related('owner')
            .prefetch_related('service_categories'))


class RankedRequests:
    """
    Up to ``limit`` recommendations, best first.

    Nothing is computed until the first iteration; iterating again replays
    the same ranking. Call ``recommend`` again for fresh results.
    """

    def __init__(self, user_id, limit):
        self.user_id = user_id
        self.limit = limit

    @cached_property
    def _ranked(self):
        if self.limit == 0:
            return []
        profile = get_profile(self.user_id)
        scored = (Recommendation(swap, score(swap, profile)) for swap in candidates(self.user_id))
        scored = (r for r in scored if r.score.total > 0)
        return heapq.nlargest(
            self.limit, scored,
            key=lambda r: (r.score.total, r.swap_request.created_at, r.swap_request.pk))

    def __iter__(self):
        return iter(self._ranked)

    def __len__(self):
        return len(self._ranked)

    def __bool__(self):
        return bool(self._ranked)


def recommend(user_id, limit):
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValidationError({'limit': ['Must be a non-negative integer.']})
    return RankedRequests(user_id, limit)
