# ==========================================
# apps/people/models.py
# ==========================================

from django.db import models
import uuid


class Gender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    OTHER = 'other', 'Other'


class Household(models.Model):
    """A family unit sharing an address and a primary phone."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    head_of_household = models.ForeignKey(
        'people.Person',
        on_delete=models.PROTECT,
        related_name='headed_households',
    )
    spouse = models.ForeignKey(
        'people.Person',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='spouse_households',
    )
    children = models.ManyToManyField('people.Person', blank=True, related_name='child_households')
    family_image = models.URLField(blank=True, null=True, default=None)

    street = models.CharField(max_length=200, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    primary_phone = models.CharField(max_length=30)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'households'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.head_of_household.last_name} household"

    def member_ids(self):
        """IDs of every person listed on the household."""
        ids = [self.head_of_household_id]
        if self.spouse_id:
            ids.append(self.spouse_id)
        ids.extend(self.children.values_list('id', flat=True))
        return ids


class Person(models.Model):
    """Anyone known to the church: members, visitors, staff."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=Gender.choices)
    phone = models.CharField(max_length=30, blank=True, db_index=True)
    email = models.EmailField(blank=True)

    # Stored inline, served by /api/people/{id}/image/
    profile_image = models.BinaryField(null=True, blank=True, editable=False)
    profile_image_content_type = models.CharField(max_length=100, blank=True)

    household = models.ForeignKey(
        Household,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
    )
    invited_by = models.CharField(max_length=200, blank=True)
    registered_event = models.ForeignKey(
        'events.Event',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='newcomers',
    )
    registration_date = models.DateTimeField(null=True, blank=True)
    group_interests = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'people'
        indexes = [
            models.Index(fields=['last_name', 'first_name'], name='people_name_idx'),
            models.Index(fields=['email'], name='people_email_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return self.full_name

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def has_profile_image(self):
        return bool(self.profile_image)
