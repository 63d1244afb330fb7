from django.contrib import admin

from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    """
    Profile list with identity id, lock state and activity flags.
    Deactivate instead of deleting; profiles have no deletion path.
    """
    list_display = (
        "id",
        "auth0_id",
        "username",
        "email",
        "is_active",
        "locked_display",
        "last_login",
        "created_at",
    )
    search_fields = ("auth0_id", "username", "email", "name")
    list_filter = ("is_active", "newsletter", "created_at")
    ordering = ("-created_at", "-id")
    readonly_fields = ("auth0_id", "last_login", "login_attempts", "created_at", "updated_at")
    actions = ("deactivate_profiles",)

    def has_delete_permission(self, request, obj=None):
        return False

    def locked_display(self, obj):
        return obj.is_locked
    locked_display.boolean = True
    locked_display.short_description = "locked"

    @admin.action(description="Deactivate selected profiles")
    def deactivate_profiles(self, request, queryset):
        queryset.update(is_active=False)
