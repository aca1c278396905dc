import pytest
from django.urls import reverse
from rest_framework import status
from apps.events.models import Event, CheckIn, EventStatus
from apps.people.models import Person, Gender


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events/"""

    def test_list_paginated(self, plain_client, dated_events):
        url = reverse('events:event-list')
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 3
        assert [e['name'] for e in response.data['results']] == ['March', 'February', 'January']

    def test_list_filters(self, plain_client, dated_events):
        url = reverse('events:event-list')
        response = plain_client.get(url, {
            'status': EventStatus.PUBLISHED,
            'end_date': '2024-02-28',
        })

        assert [e['name'] for e in response.data['results']] == ['February']

    def test_list_bad_date(self, plain_client, dated_events):
        url = reverse('events:event-list')
        response = plain_client.get(url, {'start_date': 'yesterday'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_list_unauthenticated(self, api_client):
        url = reverse('events:event-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestEventWrite:

    def test_create_event(self, manager_client, check_in_staff):
        url = reverse('events:event-list')
        data = {
            'name': 'Youth Night',
            'start_datetime': '2024-05-01T18:00:00Z',
            'end_datetime': '2024-05-01T20:00:00Z',
            'check_in_in_charge': [str(check_in_staff.id)],
        }
        response = manager_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == EventStatus.DRAFT
        assert response.data['check_in_in_charge'][0]['username'] == 'doorkeeper'
        assert response.data['total_attendance'] == 0

    def test_create_inverted_window(self, manager_client):
        url = reverse('events:event-list')
        data = {
            'name': 'Backwards',
            'start_datetime': '2024-05-01T20:00:00Z',
            'end_datetime': '2024-05-01T18:00:00Z',
        }
        response = manager_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_requires_manage_events(self, staff_client):
        url = reverse('events:event-list')
        data = {
            'name': 'Youth Night',
            'start_datetime': '2024-05-01T18:00:00Z',
            'end_datetime': '2024-05-01T20:00:00Z',
        }
        response = staff_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_partial_update(self, manager_client, event):
        url = reverse('events:event-detail', args=[event.id])
        response = manager_client.patch(url, {'status': EventStatus.COMPLETED}, format='json')

        assert response.status_code == status.HTTP_200_OK
        event.refresh_from_db()
        assert event.status == EventStatus.COMPLETED

    def test_delete(self, manager_client, event):
        url = reverse('events:event-detail', args=[event.id])
        response = manager_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Event.objects.exists()

    def test_retrieve_not_found(self, plain_client):
        url = reverse('events:event-detail', args=['00000000-0000-0000-0000-000000000000'])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestCheckInEndpoints:

    def test_check_in(self, staff_client, event, person):
        url = reverse('events:event-check-in', args=[event.id])
        response = staff_client.post(url, {'person_id': str(person.id)}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['person_name'] == 'John Doe'
        assert response.data['checked_in_by_name'] == 'Doorkeeper Staff'

    def test_check_in_twice(self, staff_client, event, person):
        url = reverse('events:event-check-in', args=[event.id])
        staff_client.post(url, {'person_id': str(person.id)}, format='json')
        response = staff_client.post(url, {'person_id': str(person.id)}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert CheckIn.objects.count() == 1

    def test_check_in_not_allowed(self, plain_client, event, person):
        url = reverse('events:event-check-in', args=[event.id])
        response = plain_client.post(url, {'person_id': str(person.id)}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_attendance(self, staff_client, event, person, check_in_staff):
        CheckIn.objects.create(event=event, person=person, checked_in_by=check_in_staff)

        url = reverse('events:event-attendance', args=[event.id])
        response = staff_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [c['person_name'] for c in response.data] == ['John Doe']

    def test_search_attendees(self, staff_client, event, family):
        url = reverse('events:event-search-attendees', args=[event.id])
        response = staff_client.get(url, {'phone': '555-0100'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 3
        assert all(p['checked_in'] is False for p in response.data)

    def test_search_attendees_requires_phone(self, staff_client, event):
        url = reverse('events:event-search-attendees', args=[event.id])
        response = staff_client.get(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_newcomers(self, plain_client, event):
        Person.objects.create(
            first_name='New',
            last_name='Comer',
            gender=Gender.FEMALE,
            invited_by='John Doe',
            registered_event=event,
        )
        url = reverse('events:event-newcomers', args=[event.id])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['invited_by'] == 'John Doe'
