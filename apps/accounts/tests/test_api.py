import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.tokens import AccessToken
from apps.accounts.models import ChurchUser, Permission, Role


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        """Successfully login with valid credentials."""
        url = reverse('auth:login')
        data = {
            'username': 'testuser',
            'password': 'TestPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['username'] == 'testuser'
        assert response.data['user']['person']['id'] == str(user.person_id)

    def test_token_carries_role_and_leaderships(self, api_client, leader_user, group):
        leader_user.group_leaderships.add(group)
        group.leaders.add(leader_user.person)

        url = reverse('auth:login')
        response = api_client.post(url, {'username': 'leader', 'password': 'TestPass123!'})

        token = AccessToken(response.data['tokens']['access'])
        assert token['role'] == Role.GROUP_LEADER
        assert Permission.MANAGE_GROUP_MEMBERS in token['permissions']
        assert token['person_id'] == str(leader_user.person_id)
        assert token['group_leaderships'] == [str(group.id)]
        assert token['subgroup_leaderships'] == []

    def test_login_wrong_password(self, api_client, user):
        """Login fails with wrong password."""
        url = reverse('auth:login')
        data = {
            'username': 'testuser',
            'password': 'WrongPassword123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_login_nonexistent_user(self, api_client, db):
        url = reverse('auth:login')
        response = api_client.post(url, {'username': 'ghost', 'password': 'SomePass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, user_inactive):
        """Inactive accounts cannot login."""
        url = reverse('auth:login')
        response = api_client.post(url, {'username': 'inactive', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_missing_fields(self, api_client, db):
        url = reverse('auth:login')
        response = api_client.post(url, {'username': 'testuser'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestGetCurrentUser:
    """Tests for GET /api/auth/me/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('auth:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['username'] == user.username
        assert response.data['role'] == Role.USER

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('auth:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestValidateGroupPermission:
    """Tests for GET /api/auth/validate-group-permission/{group_id}/"""

    def test_admin_passes(self, admin_client, group):
        url = reverse('auth:validate-group-permission', args=[group.id])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'has_permission': True}

    def test_leader_of_group_passes(self, leader_client, leader_user, group):
        leader_user.group_leaderships.add(group)

        url = reverse('auth:validate-group-permission', args=[group.id])
        response = leader_client.get(url)

        assert response.data == {'has_permission': True}

    def test_other_account_fails(self, leader_client, group):
        url = reverse('auth:validate-group-permission', args=[group.id])
        response = leader_client.get(url)

        assert response.data == {'has_permission': False}


# =============================================================================
# Church User Tests
# =============================================================================

@pytest.mark.django_db
class TestChurchUserCrud:
    """Tests for /api/church-users/"""

    def test_list(self, authenticated_client, admin_user, user):
        url = reverse('church_users:church-user-list')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2

    def test_create(self, admin_client, unlinked_person):
        url = reverse('church_users:church-user-list')
        data = {
            'username': 'mary',
            'password': 'S3cure-pass!',
            'person_id': str(unlinked_person.id),
            'role': Role.CHECK_IN_STAFF,
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Permission.PERFORM_CHECK_IN in response.data['permissions']
        assert 'password' not in response.data

    def test_create_requires_manage_users(self, authenticated_client, unlinked_person):
        url = reverse('church_users:church-user-list')
        data = {
            'username': 'mary',
            'password': 'S3cure-pass!',
            'person_id': str(unlinked_person.id),
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_duplicate_username(self, admin_client, user, unlinked_person):
        url = reverse('church_users:church-user-list')
        data = {
            'username': 'testuser',
            'password': 'S3cure-pass!',
            'person_id': str(unlinked_person.id),
        }
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_not_found(self, admin_client):
        url = reverse('church_users:church-user-detail', args=['00000000-0000-0000-0000-000000000000'])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_role(self, admin_client, user):
        url = reverse('church_users:church-user-detail', args=[user.id])
        response = admin_client.put(url, {'role': Role.GROUP_ADMIN}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert Permission.MANAGE_GROUPS in response.data['permissions']

    def test_delete(self, admin_client, user):
        url = reverse('church_users:church-user-detail', args=[user.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not ChurchUser.objects.filter(id=user.id).exists()


@pytest.mark.django_db
class TestChurchUserSearch:

    def test_search(self, authenticated_client, leader_user):
        url = reverse('church_users:church-user-search')
        response = authenticated_client.get(url, {'query': 'lea'})

        assert response.status_code == status.HTTP_200_OK
        assert [u['username'] for u in response.data['users']] == ['leader']
        assert response.data['users'][0]['name'] == leader_user.person.full_name

    def test_search_short_query(self, authenticated_client, leader_user):
        url = reverse('church_users:church-user-search')
        response = authenticated_client.get(url, {'query': 'l'})

        assert response.data == {'users': []}


@pytest.mark.django_db
class TestUpdatePermissions:

    def test_update_permissions(self, admin_client, user):
        url = reverse('church_users:church-user-update-permissions', args=[user.id])
        data = {'permissions': [Permission.MANAGE_PEOPLE]}
        response = admin_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.permissions == [Permission.MANAGE_PEOPLE]

    def test_unknown_permission(self, admin_client, user):
        url = reverse('church_users:church-user-update-permissions', args=[user.id])
        response = admin_client.put(url, {'permissions': ['fly']}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_manage_users(self, authenticated_client, user):
        url = reverse('church_users:church-user-update-permissions', args=[user.id])
        response = authenticated_client.put(url, {'permissions': []}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestLeadershipEndpoints:

    def test_assign_group_leadership(self, group_admin_client, leader_user, group):
        url = reverse('church_users:church-user-assign-group-leadership')
        data = {'user_id': str(leader_user.id), 'group_id': str(group.id)}
        response = group_admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['group_leaderships'][0]['id'] == str(group.id)
        assert group.leaders.filter(id=leader_user.person_id).exists()
        assert leader_user.group_leaderships.filter(id=group.id).exists()

    def test_remove_group_leadership(self, group_admin_client, leader_user, group):
        group.leaders.add(leader_user.person)
        leader_user.group_leaderships.add(group)

        url = reverse('church_users:church-user-remove-group-leadership')
        data = {'user_id': str(leader_user.id), 'group_id': str(group.id)}
        response = group_admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert not group.leaders.exists()
        assert not leader_user.group_leaderships.exists()

    def test_leader_cannot_assign_group_leadership(self, leader_client, user, group):
        url = reverse('church_users:church-user-assign-group-leadership')
        data = {'user_id': str(user.id), 'group_id': str(group.id)}
        response = leader_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not group.leaders.exists()

    def test_group_leader_assigns_subgroup_leader(self, leader_client, leader_user, user, group, subgroup):
        leader_user.group_leaderships.add(group)

        url = reverse('church_users:church-user-assign-subgroup-leadership')
        data = {'user_id': str(user.id), 'subgroup_id': str(subgroup.id)}
        response = leader_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert subgroup.leaders.filter(id=user.person_id).exists()
        assert user.subgroup_leaderships.filter(id=subgroup.id).exists()

    def test_remove_subgroup_leadership(self, admin_client, user, subgroup):
        subgroup.leaders.add(user.person)
        user.subgroup_leaderships.add(subgroup)

        url = reverse('church_users:church-user-remove-subgroup-leadership')
        data = {'user_id': str(user.id), 'subgroup_id': str(subgroup.id)}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert not subgroup.leaders.exists()

    def test_unknown_group(self, admin_client, user):
        url = reverse('church_users:church-user-assign-group-leadership')
        data = {'user_id': str(user.id), 'group_id': '00000000-0000-0000-0000-000000000000'}
        response = admin_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND
