from django.urls import path
from . import views

app_name = 'auth'

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('me/', views.get_current_user, name='current-user'),

    # Group permission check used by the client before showing edit controls
    path(
        'validate-group-permission/<uuid:group_id>/',
        views.validate_group_permission,
        name='validate-group-permission',
    ),
]
