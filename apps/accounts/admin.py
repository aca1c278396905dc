# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import ChurchUser, Church, Role, permissions_for_role


ROLE_COLORS = {
    Role.ADMIN: '#B85C5C',
    Role.GROUP_ADMIN: '#A47449',
    Role.GROUP_LEADER: '#6B8E5E',
    Role.EVENT_MANAGER: '#5C7AB8',
}


@admin.register(Church)
class ChurchAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(ChurchUser)
class ChurchUserAdmin(BaseUserAdmin):
    """
    Admin interface for church accounts.

    Leadership lists are read-only here; they are mirrored from
    Group.leaders / Subgroup.leaders by the groups services.
    """

    list_display = [
        'username',
        'person',
        'role_badge',
        'church',
        'is_active',
        'last_login',
    ]

    list_filter = ['role', 'is_active', 'is_staff', 'church']

    search_fields = [
        'username',
        'person__first_name',
        'person__last_name',
    ]

    ordering = ['username']
    raw_id_fields = ['person']

    fieldsets = (
        ('Basic Information', {
            'fields': ('username', 'person', 'church', 'password')
        }),
        ('Role', {
            'fields': ('role', 'permissions'),
        }),
        ('Leaderships', {
            'fields': ('group_leaderships', 'subgroup_leaderships'),
            'classes': ('collapse',),
        }),
        ('Django Admin Access', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create Account', {
            'classes': ('wide',),
            'fields': ('username', 'person', 'role', 'church', 'password1', 'password2'),
        }),
    )

    readonly_fields = [
        'group_leaderships',
        'subgroup_leaderships',
        'created_at',
        'last_login',
    ]

    filter_horizontal = []

    def role_badge(self, obj):
        """Display role as colored badge."""
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            ROLE_COLORS.get(obj.role, '#999'),
            obj.get_role_display(),
        )
    role_badge.short_description = 'Role'
    role_badge.admin_order_field = 'role'

    actions = ['activate_users', 'deactivate_users', 'reset_permissions']

    @admin.action(description='Activate selected accounts')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} account(s).')

    @admin.action(description='Deactivate selected accounts')
    def deactivate_users(self, request, queryset):
        """Deactivate selected accounts (superusers are skipped)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} account(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)

    @admin.action(description='Reset permissions to role defaults')
    def reset_permissions(self, request, queryset):
        count = 0
        for user in queryset:
            user.permissions = permissions_for_role(user.role)
            user.save(update_fields=['permissions'])
            count += 1
        self.message_user(request, f'Reset permissions on {count} account(s).')

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('person', 'church')
