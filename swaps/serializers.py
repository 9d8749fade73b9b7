from rest_framework import serializers

from .models import SwapRequest, Interaction, ProgressUpdate, Notification, Review


def user_info(user):
    return {"id": user.id, "username": user.username} if user else None


class SwapRequestInputSerializer(serializers.ModelSerializer):
    """Validates owner-editable fields. Owner and status are never writable."""
    years_of_experience = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    class Meta:
        model = SwapRequest
        fields = ['service_title', 'service_categories', 'service_required', 'service_description',
                  'years_of_experience', 'preferred_location', 'deadline',
                  'contact_name', 'contact_email', 'contact_phone']
        extra_kwargs = {
            'service_categories': {'required': False},
            'deadline': {'required': False, 'allow_null': True},
        }


class SwapRequestSerializer(serializers.ModelSerializer):
    owner_info = serializers.SerializerMethodField(read_only=True)
    category_names = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = SwapRequest
        fields = ['id', 'owner', 'owner_info', 'service_title', 'service_categories', 'category_names',
                  'service_required', 'service_description', 'years_of_experience', 'preferred_location',
                  'deadline', 'contact_name', 'contact_email', 'contact_phone', 'status',
                  'created_at', 'updated_at']
        read_only_fields = fields

    def get_owner_info(self, obj):
        return user_info(obj.owner)

    def get_category_names(self, obj):
        return [c.name for c in obj.service_categories.all()]


class InteractionSerializer(serializers.ModelSerializer):
    requester_username = serializers.ReadOnlyField(source='requester.username')
    swap_request_title = serializers.ReadOnlyField(source='swap_request.service_title')
    swap_request_status = serializers.ReadOnlyField(source='swap_request.status')

    class Meta:
        model = Interaction
        fields = ['id', 'swap_request', 'swap_request_title', 'swap_request_status',
                  'requester', 'requester_username', 'message', 'status', 'created_at', 'decided_at']
        read_only_fields = fields


class ProgressUpdateSerializer(serializers.ModelSerializer):
    author_username = serializers.ReadOnlyField(source='author.username')

    class Meta:
        model = ProgressUpdate
        fields = ['id', 'swap_request', 'author', 'author_username', 'title', 'message', 'percentage', 'created_at']
        read_only_fields = fields


class ProgressUpdateInputSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    message = serializers.CharField(required=False, allow_blank=True, default='')
    percentage = serializers.IntegerField()


class ReviewInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default='')


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'notification_type', 'message', 'status', 'swap_request', 'is_read', 'created_at']
        read_only_fields = fields


class ReviewSerializer(serializers.ModelSerializer):
    reviewer_username = serializers.CharField(source='reviewer.username', read_only=True)
    target_user_username = serializers.CharField(source='target_user.username', read_only=True)
    service_title = serializers.CharField(source='swap_request.service_title', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'swap_request', 'service_title', 'reviewer', 'reviewer_username',
                  'target_user', 'target_user_username', 'rating', 'comment', 'created_at']
        read_only_fields = fields


class RecommendationSerializer(serializers.Serializer):
    swap_request = SwapRequestSerializer(read_only=True)
    score = serializers.SerializerMethodField()
    score_breakdown = serializers.SerializerMethodField()

    def get_score(self, obj):
        return obj.score.total

    def get_score_breakdown(self, obj):
        return obj.score._asdict()
