from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets; 'members' must be registered before the empty prefix
router = DefaultRouter()
router.register(r'members', views.GroupMemberViewSet, basename='group-member')
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/                              - List church groups
    # POST   /api/groups/                              - Create group (group administrators)
    # GET    /api/groups/{id}/                         - Group details
    # PUT    /api/groups/{id}/                         - Update group (administrators, group leaders)
    # PATCH  /api/groups/{id}/                         - Partial update
    # DELETE /api/groups/{id}/                         - Delete group with subgroups and memberships

    # Custom group actions
    # GET    /api/groups/stats/                        - Dashboard counts
    # GET    /api/groups/by-interest/{interest}/       - Active groups matching an interest
    # GET    /api/groups/{id}/members/                 - List members
    # POST   /api/groups/{id}/members/                 - Add member
    # GET    /api/groups/{id}/attendance/              - Attendance report (start_date, end_date)
    # POST   /api/groups/{id}/attendance/              - Record attendance for many members
    # POST   /api/groups/{id}/subgroups/               - Create subgroup

    # Membership routes
    # PUT    /api/groups/members/{member_id}/            - Update membership
    # DELETE /api/groups/members/{member_id}/            - Remove membership
    # POST   /api/groups/members/{member_id}/attendance/ - Record one attendance entry

    path('', include(router.urls)),
]
