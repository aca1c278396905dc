from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'subgroups'

router = DefaultRouter()
router.register(r'', views.SubgroupViewSet, basename='subgroup')

urlpatterns = [
    # GET    /api/subgroups/                              - List church subgroups
    # POST   /api/subgroups/                              - Create subgroup (body: parent_group)
    # GET    /api/subgroups/by-group/{group_id}/          - Subgroups of a group
    # GET    /api/subgroups/{id}/                         - Subgroup details
    # PUT    /api/subgroups/{id}/                         - Update subgroup
    # DELETE /api/subgroups/{id}/                         - Delete subgroup, members stay in the group
    # GET    /api/subgroups/{id}/members/                 - Subgroup members
    # POST   /api/subgroups/{id}/members/{person_id}/     - Move a group member into the subgroup
    # DELETE /api/subgroups/{id}/members/{person_id}/     - Take a member out of the subgroup
    # GET    /api/subgroups/{id}/attendance/              - Attendance report
    # POST   /api/subgroups/{id}/attendance/              - Record attendance

    path('', include(router.urls)),
]
