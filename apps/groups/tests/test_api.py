import pytest
from django.urls import reverse
from rest_framework import status

from apps.groups.models import Group, Subgroup, GroupMember, AttendanceEntry


@pytest.mark.django_db
class TestGroupEndpoints:

    def test_list_requires_auth(self, api_client):
        response = api_client.get(reverse('groups:group-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_groups(self, outsider_client, group, other_group):
        response = outsider_client.get(reverse('groups:group-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [g['name'] for g in response.data['results']] == ['Choir', 'Youth']

    def test_create_group(self, admin_client, admin_user):
        response = admin_client.post(
            reverse('groups:group-list'),
            {'name': 'Men', 'purpose': 'Prayer breakfast', 'meeting_day': 'saturday'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        group = Group.objects.get(id=response.data['id'])
        assert group.church_id == admin_user.church_id
        assert response.data['member_count'] == 0

    def test_create_group_forbidden_for_leader(self, leader_client):
        response = leader_client.post(reverse('groups:group-list'), {'name': 'Men'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_create_group_with_bad_day(self, admin_client):
        response = admin_client.post(
            reverse('groups:group-list'),
            {'name': 'Men', 'meeting_day': 'someday'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_retrieve_group(self, outsider_client, group, subgroup):
        response = outsider_client.get(reverse('groups:group-detail', kwargs={'pk': group.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Youth'
        assert [s['name'] for s in response.data['subgroups']] == ['Worship Team']

    def test_put_is_partial(self, leader_client, group):
        response = leader_client.put(
            reverse('groups:group-detail', kwargs={'pk': group.id}),
            {'meeting_location': 'Hall B'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        group.refresh_from_db()
        assert group.meeting_location == 'Hall B'
        assert group.name == 'Youth'

    def test_update_forbidden_for_outsider(self, outsider_client, group):
        response = outsider_client.patch(
            reverse('groups:group-detail', kwargs={'pk': group.id}),
            {'name': 'Renamed'},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_group_cascades(self, admin_client, group, subgroup, member, subgroup_member):
        response = admin_client.delete(reverse('groups:group-detail', kwargs={'pk': group.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'message': 'Group deleted'}
        assert not Subgroup.objects.filter(id=subgroup.id).exists()
        assert not GroupMember.objects.filter(group_id=group.id).exists()

    def test_delete_group_forbidden_for_leader(self, leader_client, group):
        response = leader_client.delete(reverse('groups:group-detail', kwargs={'pk': group.id}))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Group.objects.filter(id=group.id).exists()

    def test_group_in_other_church_is_not_found(self, foreign_client, group):
        response = foreign_client.get(reverse('groups:group-detail', kwargs={'pk': group.id}))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_stats(self, leader_client, group, other_group):
        response = leader_client.get(reverse('groups:group-stats'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_groups'] == 2
        assert response.data['user_groups'] == 1

    def test_by_interest(self, outsider_client, group, other_group):
        response = outsider_client.get(reverse('groups:group-by-interest', kwargs={'interest': 'worship'}))

        assert response.status_code == status.HTTP_200_OK
        assert [g['name'] for g in response.data] == ['Youth']


@pytest.mark.django_db
class TestGroupMemberEndpoints:

    def test_list_members(self, outsider_client, group, member, subgroup_member):
        response = outsider_client.get(reverse('groups:group-members', kwargs={'pk': group.id}))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_add_member(self, leader_client, group, person):
        response = leader_client.post(
            reverse('groups:group-members', kwargs={'pk': group.id}),
            {'person_id': str(person.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['person']['id'] == str(person.id)
        assert response.data['group_name'] == 'Youth'

    def test_add_member_twice(self, leader_client, group, member, person):
        response = leader_client.post(
            reverse('groups:group-members', kwargs={'pk': group.id}),
            {'person_id': str(person.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'already a member' in response.data['error']

    def test_add_member_forbidden_for_outsider(self, outsider_client, group, person):
        response = outsider_client.post(
            reverse('groups:group-members', kwargs={'pk': group.id}),
            {'person_id': str(person.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_add_unknown_person(self, leader_client, group):
        response = leader_client.post(
            reverse('groups:group-members', kwargs={'pk': group.id}),
            {'person_id': '00000000-0000-0000-0000-000000000000'},
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_member_subgroup_mismatch(self, admin_client, member, other_subgroup):
        response = admin_client.put(
            reverse('groups:group-member-detail', kwargs={'pk': member.id}),
            {'subgroup_id': str(other_subgroup.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_update_member_role(self, leader_client, member):
        response = leader_client.patch(
            reverse('groups:group-member-detail', kwargs={'pk': member.id}),
            {'role': 'assistant'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['role'] == 'assistant'

    def test_remove_member(self, leader_client, member):
        response = leader_client.delete(reverse('groups:group-member-detail', kwargs={'pk': member.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'message': 'Member removed from group'}
        assert not GroupMember.objects.filter(id=member.id).exists()

    def test_record_single_attendance(self, leader_client, member):
        response = leader_client.post(
            reverse('groups:group-member-attendance', kwargs={'pk': member.id}),
            {'date': '2024-01-07', 'status': 'present'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert AttendanceEntry.objects.filter(member=member).count() == 1


@pytest.mark.django_db
class TestGroupAttendanceEndpoints:

    def test_bulk_then_report(self, leader_client, group, member, subgroup_member):
        url = reverse('groups:group-attendance', kwargs={'pk': group.id})

        response = leader_client.post(
            url,
            {
                'date': '2024-01-07',
                'attendance_data': [
                    {'member_id': str(member.id), 'status': 'present'},
                    {'member_id': str(subgroup_member.id), 'status': 'absent'},
                ],
            },
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert all(r['success'] for r in response.data)

        # Same date again is kept as a second entry
        leader_client.post(
            url,
            {'date': '2024-01-07', 'attendance_data': [{'member_id': str(member.id), 'status': 'present'}]},
            format='json',
        )

        report = leader_client.get(url, {'start_date': '2024-01-01', 'end_date': '2024-01-31'})

        assert report.status_code == status.HTTP_200_OK
        rows = {row['member_id']: row for row in report.data}
        assert len(rows[member.id]['attendance']) == 2
        assert len(rows[subgroup_member.id]['attendance']) == 1

    def test_report_requires_dates(self, leader_client, group):
        response = leader_client.get(reverse('groups:group-attendance', kwargs={'pk': group.id}))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_report_forbidden_for_outsider(self, outsider_client, group):
        response = outsider_client.get(
            reverse('groups:group-attendance', kwargs={'pk': group.id}),
            {'start_date': '2024-01-01', 'end_date': '2024-01-31'},
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestSubgroupEndpoints:

    def test_create_through_group_action(self, leader_client, group):
        response = leader_client.post(
            reverse('groups:group-subgroups', kwargs={'pk': group.id}),
            {'name': 'Tech'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['parent_group'] == group.id
        assert response.data['parent_group_name'] == 'Youth'

    def test_create_with_parent_in_body(self, admin_client, group):
        response = admin_client.post(
            reverse('subgroups:subgroup-list'),
            {'name': 'Tech', 'parent_group': str(group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_create_without_parent(self, admin_client):
        response = admin_client.post(reverse('subgroups:subgroup-list'), {'name': 'Tech'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_in_other_group_forbidden(self, leader_client, other_group):
        response = leader_client.post(
            reverse('subgroups:subgroup-list'),
            {'name': 'Tech', 'parent_group': str(other_group.id)},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_by_group(self, outsider_client, group, subgroup, other_subgroup):
        response = outsider_client.get(reverse('subgroups:subgroup-by-group', kwargs={'group_id': group.id}))

        assert response.status_code == status.HTTP_200_OK
        assert [s['name'] for s in response.data] == ['Worship Team']

    def test_subgroup_leader_updates(self, subgroup_leader_client, subgroup):
        response = subgroup_leader_client.put(
            reverse('subgroups:subgroup-detail', kwargs={'pk': subgroup.id}),
            {'meeting_time': '18:00'},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meeting_time'] == '18:00'

    def test_outsider_cannot_update(self, outsider_client, subgroup):
        response = outsider_client.patch(
            reverse('subgroups:subgroup-detail', kwargs={'pk': subgroup.id}),
            {'name': 'Renamed'},
            format='json',
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_keeps_members_in_group(self, leader_client, subgroup, subgroup_member, group):
        response = leader_client.delete(reverse('subgroups:subgroup-detail', kwargs={'pk': subgroup.id}))

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'message': 'Subgroup deleted'}
        subgroup_member.refresh_from_db()
        assert subgroup_member.subgroup is None
        assert subgroup_member.group == group

    def test_members(self, outsider_client, subgroup, subgroup_member, member):
        response = outsider_client.get(reverse('subgroups:subgroup-members', kwargs={'pk': subgroup.id}))

        assert response.status_code == status.HTTP_200_OK
        assert [m['id'] for m in response.data] == [str(subgroup_member.id)]

    def test_move_member_into_subgroup(self, subgroup_leader_client, subgroup, member, person):
        url = reverse('subgroups:subgroup-member', kwargs={'pk': subgroup.id, 'person_id': person.id})

        response = subgroup_leader_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        member.refresh_from_db()
        assert member.subgroup == subgroup

        response = subgroup_leader_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        member.refresh_from_db()
        assert member.subgroup is None

    def test_move_non_member_into_subgroup(self, admin_client, subgroup, person):
        url = reverse('subgroups:subgroup-member', kwargs={'pk': subgroup.id, 'person_id': person.id})

        response = admin_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_subgroup_bulk_attendance(self, subgroup_leader_client, subgroup, subgroup_member, member):
        response = subgroup_leader_client.post(
            reverse('subgroups:subgroup-attendance', kwargs={'pk': subgroup.id}),
            {
                'date': '2024-01-07',
                'attendance_data': [
                    {'member_id': str(subgroup_member.id), 'status': 'present'},
                    {'member_id': str(member.id), 'status': 'present'},
                ],
            },
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert [r['success'] for r in response.data] == [True, False]
