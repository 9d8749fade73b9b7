from django.contrib import admin
from .models import SwapRequest, Interaction, ProgressUpdate, Notification, Review


class InteractionInline(admin.TabularInline):
    model = Interaction
    extra = 0
    readonly_fields = ('requester', 'status', 'created_at', 'decided_at')


@admin.register(SwapRequest)
class SwapRequestAdmin(admin.ModelAdmin):
    list_display = ('service_title', 'owner', 'service_required', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('service_title', 'service_required', 'owner__username')
    inlines = [InteractionInline]


@admin.register(Interaction)
class InteractionAdmin(admin.ModelAdmin):
    list_display = ('requester', 'swap_request', 'status', 'created_at', 'decided_at')
    list_filter = ('status', 'created_at')
    search_fields = ('requester__username', 'swap_request__service_title')


@admin.register(ProgressUpdate)
class ProgressUpdateAdmin(admin.ModelAdmin):
    # Append-only: admin sadece okuyabilir
    list_display = ('swap_request', 'author', 'percentage', 'short_message', 'created_at')

    def short_message(self, obj):
        return obj.message[:50]

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('recipient_kind', 'recipient_id', 'notification_type', 'is_read', 'created_at')
    list_filter = ('notification_type', 'recipient_kind', 'is_read')


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('reviewer', 'target_user', 'swap_request', 'rating', 'created_at')
