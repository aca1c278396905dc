from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'church_users'

router = DefaultRouter()
router.register(r'', views.ChurchUserViewSet, basename='church-user')

urlpatterns = [
    # GET    /api/church-users/                               - List accounts
    # POST   /api/church-users/                               - Create account
    # GET    /api/church-users/search/                        - Search (query, role)
    # POST   /api/church-users/assign-group-leadership/       - Body: user_id, group_id
    # POST   /api/church-users/remove-group-leadership/       - Body: user_id, group_id
    # POST   /api/church-users/assign-subgroup-leadership/    - Body: user_id, subgroup_id
    # POST   /api/church-users/remove-subgroup-leadership/    - Body: user_id, subgroup_id
    # GET    /api/church-users/{id}/                          - Account details
    # PUT    /api/church-users/{id}/                          - Update account
    # DELETE /api/church-users/{id}/                          - Delete account
    # PUT    /api/church-users/{id}/update-permissions/       - Override permissions

    path('', include(router.urls)),
]
