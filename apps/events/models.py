# ==========================================
# apps/events/models.py
# ==========================================

from django.db import models
from django.utils import timezone
import uuid


class EventStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    PUBLISHED = 'published', 'Published'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'


class RecurringFrequency(models.TextChoices):
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'


class Event(models.Model):
    """A scheduled church event people can be checked in to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    start_datetime = models.DateTimeField()
    end_datetime = models.DateTimeField()
    status = models.CharField(max_length=20, choices=EventStatus.choices, default=EventStatus.DRAFT)

    # Recurrence is stored as entered; no occurrences are generated from it
    is_recurring = models.BooleanField(default=False)
    recurring_frequency = models.CharField(
        max_length=10,
        choices=RecurringFrequency.choices,
        blank=True,
    )
    recurring_days = models.JSONField(default=list, blank=True)
    recurring_end_date = models.DateField(null=True, blank=True)

    event_in_charge = models.ManyToManyField(
        'accounts.ChurchUser',
        blank=True,
        related_name='events_in_charge',
    )
    check_in_in_charge = models.ManyToManyField(
        'accounts.ChurchUser',
        blank=True,
        related_name='check_in_events',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'events'
        indexes = [
            models.Index(fields=['start_datetime'], name='events_start_idx'),
            models.Index(fields=['status'], name='events_status_idx'),
        ]
        ordering = ['-start_datetime']

    def __str__(self):
        return self.name

    @property
    def total_attendance(self):
        return self.check_ins.count()

    def is_check_in_staff(self, user):
        return self.check_in_in_charge.filter(id=user.id).exists()


class CheckIn(models.Model):
    """A person's attendance at an event."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name='check_ins')
    person = models.ForeignKey('people.Person', on_delete=models.CASCADE, related_name='check_ins')
    checked_in_by = models.ForeignKey(
        'accounts.ChurchUser',
        on_delete=models.SET_NULL,
        null=True,
        related_name='performed_check_ins',
    )
    check_in_time = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'event_check_ins'
        unique_together = [['event', 'person']]
        ordering = ['-check_in_time']

    def __str__(self):
        return f"{self.person.full_name} at {self.event.name}"
