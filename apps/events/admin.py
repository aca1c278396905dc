# ==========================================
# apps/events/admin.py
# ==========================================

from django.contrib import admin
from apps.events.models import Event, CheckIn


class CheckInInline(admin.TabularInline):
    """Inline admin for event check-ins."""
    model = CheckIn
    extra = 0
    fields = ['person', 'checked_in_by', 'check_in_time']
    readonly_fields = ['check_in_time']
    raw_id_fields = ['person']


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    """Admin interface for Events."""

    list_display = ['name', 'start_datetime', 'end_datetime', 'status', 'is_recurring', 'total_attendance']
    list_filter = ['status', 'is_recurring', 'start_datetime']
    search_fields = ['name', 'description']
    date_hierarchy = 'start_datetime'
    filter_horizontal = ['event_in_charge', 'check_in_in_charge']
    inlines = [CheckInInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'description', 'status')
        }),
        ('Schedule', {
            'fields': ('start_datetime', 'end_datetime')
        }),
        ('Recurrence', {
            'fields': ('is_recurring', 'recurring_frequency', 'recurring_days', 'recurring_end_date'),
            'classes': ('collapse',)
        }),
        ('Staff', {
            'fields': ('event_in_charge', 'check_in_in_charge')
        }),
    )


@admin.register(CheckIn)
class CheckInAdmin(admin.ModelAdmin):
    list_display = ['person', 'event', 'checked_in_by', 'check_in_time']
    list_filter = ['check_in_time']
    search_fields = ['person__first_name', 'person__last_name', 'event__name']
    raw_id_fields = ['person', 'event']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('person', 'event', 'checked_in_by')
