from django.conf import settings

DEFAULTS = {
    'NOTIFICATION_SINK': 'swaps.notifications.DatabaseNotificationSink',
    'ALLOW_REAPPLY_AFTER_REJECTION': True,
    'RECOMMENDATION_LIMIT': 10,
    'RECOMMENDATION_MAX_LIMIT': 50,
}


def swaps_setting(name):
    """Read a key from ``settings.SWAPS``, falling back to the defaults above."""
    return getattr(settings, 'SWAPS', {}).get(name, DEFAULTS[name])
