# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from apps.groups.models import Group, Subgroup, GroupMember, AttendanceEntry


class SubgroupInline(admin.TabularInline):
    """Inline admin for subgroups."""
    model = Subgroup
    extra = 0
    fields = ['name', 'meeting_day', 'meeting_time', 'is_active']
    show_change_link = True


class GroupMemberInline(admin.TabularInline):
    """Inline admin for group memberships."""
    model = GroupMember
    extra = 0
    fields = ['person', 'subgroup', 'role', 'is_active', 'join_date']
    raw_id_fields = ['person']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Admin interface for Groups."""

    list_display = [
        'name',
        'church',
        'meeting_day',
        'meeting_frequency',
        'member_count',
        'is_active',
        'created_at'
    ]
    list_filter = ['is_active', 'meeting_frequency', 'meeting_day']
    search_fields = ['name', 'description', 'purpose']
    readonly_fields = ['created_at', 'updated_at']
    filter_horizontal = ['leaders']
    inlines = [SubgroupInline, GroupMemberInline]
    ordering = ['name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'purpose', 'church', 'is_active')
        }),
        ('Meetings', {
            'fields': (
                'meeting_frequency',
                'custom_frequency',
                'meeting_day',
                'meeting_time',
                'meeting_location',
            )
        }),
        ('Leadership', {
            'fields': ('leaders', 'created_by')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def member_count(self, obj):
        """Show number of members."""
        return obj.memberships.count()
    member_count.short_description = 'Members'

    def has_delete_permission(self, request, obj=None):
        # Deletion goes through the cascade service
        return False


@admin.register(Subgroup)
class SubgroupAdmin(admin.ModelAdmin):
    """Admin interface for Subgroups."""

    list_display = ['name', 'parent_group', 'meeting_day', 'is_active']
    list_filter = ['is_active', 'meeting_day']
    search_fields = ['name', 'parent_group__name']
    filter_horizontal = ['leaders']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('parent_group')

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(GroupMember)
class GroupMemberAdmin(admin.ModelAdmin):
    """Admin interface for Group Members."""

    list_display = ['person', 'group', 'subgroup', 'role', 'is_active', 'join_date']
    list_filter = ['role', 'is_active']
    search_fields = ['person__first_name', 'person__last_name', 'group__name']
    raw_id_fields = ['person']
    date_hierarchy = 'join_date'

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('person', 'group', 'subgroup')


@admin.register(AttendanceEntry)
class AttendanceEntryAdmin(admin.ModelAdmin):
    list_display = ['member', 'date', 'status', 'recorded_at']
    list_filter = ['status', 'date']
    readonly_fields = ['recorded_at']
