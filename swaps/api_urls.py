from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    SwapRequestViewSet,
    interaction_action_api, sent_interactions_api, received_interactions_api,
    notification_count, notification_list_api, mark_notifications_read_api,
    user_reviews_api, organization_swaps_api,
)

router = DefaultRouter()
router.register(r'swap-requests', SwapRequestViewSet, basename='swap-request')

urlpatterns = [
    path('', include(router.urls)),

    path('interactions/sent/', sent_interactions_api, name='api-sent-interactions'),
    path('interactions/received/', received_interactions_api, name='api-received-interactions'),
    path('interactions/<int:interaction_id>/<str:action>/', interaction_action_api, name='api-interaction-action'),
    path('notifications/count/', notification_count, name='api-notification-count'),
    path('notifications/list/', notification_list_api, name='api-notification-list'),
    path('notifications/mark-read/', mark_notifications_read_api, name='api-mark-notifications-read'),
    path('profile/<int:user_id>/reviews/', user_reviews_api, name='api-user-reviews'),
    path('organizations/<int:organization_id>/swaps/', organization_swaps_api, name='api-organization-swaps'),
]
