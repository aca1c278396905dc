# ==========================================
# apps/people/admin.py
# ==========================================

from django.contrib import admin
from apps.people.models import Person, Household


class PersonInline(admin.TabularInline):
    """Inline admin for household members."""
    model = Person
    extra = 0
    fields = ['first_name', 'last_name', 'phone', 'email']
    show_change_link = True


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    """Admin interface for People."""

    list_display = ['full_name', 'email', 'phone', 'gender', 'household', 'created_at']
    list_filter = ['gender', 'created_at']
    search_fields = ['first_name', 'last_name', 'email', 'phone']
    readonly_fields = ['registration_date', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['last_name', 'first_name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('first_name', 'last_name', 'date_of_birth', 'gender')
        }),
        ('Contact', {
            'fields': ('phone', 'email', 'household')
        }),
        ('Registration', {
            'fields': ('invited_by', 'registered_event', 'registration_date', 'group_interests')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Household)
class HouseholdAdmin(admin.ModelAdmin):
    """Admin interface for Households."""

    list_display = ['__str__', 'primary_phone', 'city', 'created_at']
    search_fields = ['head_of_household__last_name', 'primary_phone', 'city']
    raw_id_fields = ['head_of_household', 'spouse']
    filter_horizontal = ['children']
    inlines = [PersonInline]

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('head_of_household')
