"""
Read-only profile lookups used by the swap services.

The swap services never touch the user model directly for matching; they go
through ``get_profile`` so the profile source can be swapped out.
"""
from collections import namedtuple

from django.contrib.auth import get_user_model
from rest_framework.exceptions import NotFound

Profile = namedtuple('Profile', 'user_id skills categories city organization_id active')


class Participant(namedtuple('Participant', 'kind id')):
    """A notification recipient: either a user or an organization."""
    USER = 'user'
    ORGANIZATION = 'organization'
    __slots__ = ()

    @classmethod
    def user(cls, user_id):
        return cls(cls.USER, user_id)

    @classmethod
    def organization(cls, organization_id):
        return cls(cls.ORGANIZATION, organization_id)


def get_profile(user_id):
    User = get_user_model()
    try:
        user = User.objects.prefetch_related('categories').get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound(f"User {user_id} not found")
    return Profile(
        user_id=user.pk,
        skills=[s for s in (user.skills or []) if isinstance(s, str) and s.strip()],
        categories=frozenset(c.pk for c in user.categories.all()),
        city=user.city or '',
        organization_id=user.organization_id,
        active=user.is_active,
    )
