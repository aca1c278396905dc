from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'people'

router = DefaultRouter()
router.register(r'', views.PersonViewSet, basename='person')

urlpatterns = [
    # GET    /api/people/                    - Paginated list (search, group_id, page, page_size)
    # POST   /api/people/                    - Create person
    # GET    /api/people/search/             - Typeahead (query, group)
    # POST   /api/people/quick-register/     - Register a newcomer
    # GET    /api/people/{id}/               - Person details
    # PUT    /api/people/{id}/               - Update person
    # DELETE /api/people/{id}/               - Delete person and their memberships
    # GET    /api/people/{id}/groups/        - Memberships and leaderships
    # GET    /api/people/{id}/image/         - Profile image bytes
    # PUT    /api/people/{id}/image/         - Upload profile image (multipart)

    path('', include(router.urls)),
]
