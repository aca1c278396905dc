import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status
from apps.groups.models import Group, GroupMember
from apps.people.models import Person, Household


# =============================================================================
# Person CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestPersonList:
    """Tests for GET /api/people/"""

    def test_list_is_paginated(self, plain_client, person, other_person):
        url = reverse('people:person-list')
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert 'results' in response.data
        # the account holder is a person too
        assert response.data['count'] == 3

    def test_list_search_filter(self, plain_client, person, other_person):
        url = reverse('people:person-list')
        response = plain_client.get(url, {'search': 'smith'})

        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.data['results']] == [str(other_person.id)]

    def test_list_unauthenticated(self, api_client):
        url = reverse('people:person-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestPersonCreate:
    """Tests for POST /api/people/"""

    def test_create_person(self, admin_client):
        url = reverse('people:person-list')
        data = {
            'first_name': 'Ruth',
            'last_name': 'Moab',
            'gender': 'female',
            'group_interests': ['Choir'],
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['full_name'] == 'Ruth Moab'
        assert response.data['has_profile_image'] is False
        assert Person.objects.filter(first_name='Ruth').exists()

    def test_create_requires_manage_people(self, plain_client):
        url = reverse('people:person-list')
        data = {'first_name': 'Ruth', 'last_name': 'Moab', 'gender': 'female'}
        response = plain_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_invalid_gender(self, admin_client):
        url = reverse('people:person-list')
        data = {'first_name': 'Ruth', 'last_name': 'Moab', 'gender': 'unknown'}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestPersonDetail:
    """Tests for GET/PATCH/DELETE /api/people/{id}/"""

    def test_retrieve(self, plain_client, person):
        url = reverse('people:person-detail', args=[person.id])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == 'john@example.com'

    def test_retrieve_not_found(self, plain_client):
        url = reverse('people:person-detail', args=['00000000-0000-0000-0000-000000000000'])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_partial_update(self, admin_client, person):
        url = reverse('people:person-detail', args=[person.id])
        response = admin_client.patch(url, {'phone': '555-1234'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        person.refresh_from_db()
        assert person.phone == '555-1234'

    def test_delete_removes_memberships(self, admin_client, person):
        group = Group.objects.create(name='Choir')
        GroupMember.objects.create(group=group, person=person)

        url = reverse('people:person-detail', args=[person.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Person.objects.filter(id=person.id).exists()
        assert not GroupMember.objects.exists()

    def test_delete_account_holder_conflicts(self, admin_client, plain_account):
        url = reverse('people:person-detail', args=[plain_account.person_id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_409_CONFLICT


@pytest.mark.django_db
class TestPersonActions:

    def test_typeahead_search(self, plain_client, person):
        url = reverse('people:person-search')
        response = plain_client.get(url, {'query': 'Jo'})

        assert response.status_code == status.HTTP_200_OK
        assert [p['id'] for p in response.data['people']] == [str(person.id)]

    def test_typeahead_short_query(self, plain_client, person):
        url = reverse('people:person-search')
        response = plain_client.get(url, {'query': 'J'})

        assert response.data['people'] == []

    def test_quick_register_by_check_in_staff(self, check_in_client, event):
        url = reverse('people:person-quick-register')
        data = {
            'first_name': 'New',
            'last_name': 'Comer',
            'gender': 'male',
            'event_id': str(event.id),
        }
        response = check_in_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['registered_event'] == event.id

    def test_quick_register_forbidden_for_plain_user(self, plain_client):
        url = reverse('people:person-quick-register')
        data = {'first_name': 'New', 'last_name': 'Comer', 'gender': 'male'}
        response = plain_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_person_groups(self, plain_client, person):
        group = Group.objects.create(name='Choir')
        GroupMember.objects.create(group=group, person=person)

        url = reverse('people:person-groups', args=[person.id])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['as_member'][0]['group']['name'] == 'Choir'
        assert response.data['as_leader'] == []

    def test_image_upload_and_download(self, admin_client, person):
        url = reverse('people:person-image', args=[person.id])
        upload = SimpleUploadedFile('me.png', b'png-bytes', content_type='image/png')
        response = admin_client.put(url, {'profile_image': upload}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['has_profile_image'] is True

        response = admin_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.content == b'png-bytes'
        assert response['Content-Type'] == 'image/png'

    def test_image_missing(self, plain_client, person):
        url = reverse('people:person-image', args=[person.id])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Household Tests
# =============================================================================

@pytest.mark.django_db
class TestHouseholds:

    def test_create_household(self, admin_client, person, spouse, child):
        url = reverse('households:household-list')
        data = {
            'head_of_household': str(person.id),
            'spouse': str(spouse.id),
            'children': [str(child.id)],
            'primary_phone': '555-0100',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['head_of_household']['id'] == str(person.id)
        assert len(response.data['children']) == 1
        child.refresh_from_db()
        assert str(child.household_id) == response.data['id']

    def test_create_forbidden_for_plain_user(self, plain_client, person):
        url = reverse('households:household-list')
        data = {'head_of_household': str(person.id), 'primary_phone': '555'}
        response = plain_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_unknown_head(self, admin_client):
        url = reverse('households:household-list')
        data = {
            'head_of_household': '00000000-0000-0000-0000-000000000000',
            'primary_phone': '555',
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_household(self, plain_client, household):
        url = reverse('households:household-detail', args=[household.id])
        response = plain_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['spouse']['first_name'] == 'Jane'

    def test_delete_household(self, admin_client, household, person):
        url = reverse('households:household-detail', args=[household.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not Household.objects.exists()
        person.refresh_from_db()
        assert person.household is None
