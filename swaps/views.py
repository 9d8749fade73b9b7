from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.response import Response

from . import ledger, notifications, progress, recommend, reviews, store
from .conf import swaps_setting
from .exceptions import Forbidden, ValidationError
from .recommend import Recommendation, Score
from .serializers import (
    InteractionSerializer, NotificationSerializer, ProgressUpdateInputSerializer, ProgressUpdateSerializer,
    RecommendationSerializer, ReviewInputSerializer, ReviewSerializer, SwapRequestSerializer,
)


def _int_param(request, name, default=None):
    value = request.query_params.get(name)
    if value in (None, ''):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError({name: ['Must be an integer.']})


# --- SWAP REQUESTS ---
class SwapRequestViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r'\d+'

    def list(self, request):
        # ?owner=<id> kullanıcının tüm ilanları, yoksa başkalarının açık ilanları
        owner_id = _int_param(request, 'owner')
        qs = store.general_listing(viewer_id=request.user.id, owner_id=owner_id)
        return Response(SwapRequestSerializer(qs, many=True).data)

    def create(self, request):
        swap = store.create(request.user.id, request.data)
        return Response(SwapRequestSerializer(swap).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(SwapRequestSerializer(store.get(pk)).data)

    def update(self, request, pk=None):
        swap = store.edit(pk, request.user.id, request.data)
        return Response(SwapRequestSerializer(swap).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        store.delete(pk, request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        swap = store.cancel(pk, request.user.id)
        return Response(SwapRequestSerializer(swap).data)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        swap = store.transition_to_completed(pk, actor_id=request.user.id)
        return Response(SwapRequestSerializer(swap).data)

    @action(detail=True, methods=['get', 'post'])
    def interactions(self, request, pk=None):
        if request.method == 'POST':
            interaction = ledger.place_request(pk, request.user.id, request.data.get('message', ''))
            return Response(InteractionSerializer(interaction).data, status=status.HTTP_201_CREATED)
        return Response(InteractionSerializer(ledger.for_request(pk, request.user.id), many=True).data)

    @action(detail=True, methods=['get', 'post'])
    def progress(self, request, pk=None):
        if request.method == 'POST':
            payload = ProgressUpdateInputSerializer(data=request.data)
            payload.is_valid(raise_exception=True)
            update = progress.post_update(pk, request.user.id, **payload.validated_data)
            return Response(ProgressUpdateSerializer(update).data, status=status.HTTP_201_CREATED)
        updates = progress.timeline(pk, request.user.id)
        swap = store.get(pk)
        owner_id, partner_id = swap.participant_ids()
        return Response({
            'updates': ProgressUpdateSerializer(updates, many=True).data,
            'owner_percentage': progress.latest_percentage(swap.pk, owner_id),
            'partner_percentage': progress.latest_percentage(swap.pk, partner_id) if partner_id else 0,
        })

    @action(detail=True, methods=['post'])
    def review(self, request, pk=None):
        payload = ReviewInputSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        review = reviews.leave_review(pk, request.user.id, **payload.validated_data)
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'])
    def recommended(self, request):
        limit = _int_param(request, 'limit', swaps_setting('RECOMMENDATION_LIMIT'))
        limit = min(limit, swaps_setting('RECOMMENDATION_MAX_LIMIT'))
        ranked = recommend.recommend(request.user.id, limit)
        if ranked:
            return Response({'fallback': False, 'results': RecommendationSerializer(ranked, many=True).data})
        # Hiç eşleşme yoksa genel listeye dön
        listing = store.general_listing(viewer_id=request.user.id)[:limit]
        fallback = [Recommendation(swap, Score(0, 0, 0)) for swap in listing]
        return Response({'fallback': True, 'results': RecommendationSerializer(fallback, many=True).data})


# --- INTERACTIONS ---
@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def interaction_action_api(request, interaction_id, action):
    if action == 'approve':
        interaction = ledger.approve(interaction_id, request.user.id)
    elif action == 'reject':
        interaction = ledger.reject(interaction_id, request.user.id)
    else:
        return Response({'error': f"Unknown action '{action}'"}, status=status.HTTP_400_BAD_REQUEST)
    return Response(InteractionSerializer(interaction).data)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def sent_interactions_api(request):
    """Kullanıcının gönderdiği istekler"""
    return Response(InteractionSerializer(ledger.sent(request.user.id), many=True).data)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def received_interactions_api(request):
    """Kullanıcının ilanlarına gelen istekler (?status=pending ile filtrelenebilir)"""
    qs = ledger.received(request.user.id, request.query_params.get('status'))
    return Response(InteractionSerializer(qs, many=True).data)


# --- NOTIFICATIONS ---
@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def notification_count(request):
    return Response({'count': notifications.unread_count(request.user.id)})


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def notification_list_api(request):
    qs = notifications.for_user(request.user.id)[:50]
    return Response(NotificationSerializer(qs, many=True).data)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def mark_notifications_read_api(request):
    ids = request.data.get('ids')
    if ids is not None and (not isinstance(ids, list) or not all(isinstance(i, int) for i in ids)):
        raise ValidationError({'ids': ['Must be a list of notification ids.']})
    updated = notifications.mark_read(request.user.id, ids)
    return Response({'status': 'ok', 'updated': updated})


# --- REVIEWS & ORGANIZATIONS ---
@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def user_reviews_api(request, user_id):
    return Response(ReviewSerializer(reviews.reviews_for(user_id), many=True).data)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def organization_swaps_api(request, organization_id):
    """Organizasyon yöneticisi üyelerin tüm swap'larını görür"""
    user = request.user
    if not user.is_superuser and not (user.is_staff and user.organization_id == organization_id):
        raise Forbidden("Only staff members of this organization can view its swaps.")
    result = []
    for swap, partner in store.organization_swaps(organization_id):
        data = SwapRequestSerializer(swap).data
        data['partner_info'] = {'id': partner.id, 'username': partner.username} if partner else None
        result.append(data)
    return Response(result)
