from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User, Organization, Category


@admin.register(User)
class SkillSwapUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'city', 'organization', 'completed_swaps_count', 'is_active')
    list_filter = UserAdmin.list_filter + ('organization',)
    fieldsets = UserAdmin.fieldsets + (
        ('Marketplace', {'fields': ('skills', 'city', 'organization', 'categories',
                                    'completed_swaps_count', 'positive_reviews_count')}),
    )
    filter_horizontal = UserAdmin.filter_horizontal + ('categories',)


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'organization')
    search_fields = ('name',)
