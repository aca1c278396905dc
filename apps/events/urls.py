from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'events'

router = DefaultRouter()
router.register(r'', views.EventViewSet, basename='event')

urlpatterns = [
    # GET    /api/events/                          - Paginated list (status, start_date, end_date)
    # POST   /api/events/                          - Create event
    # GET    /api/events/{id}/                     - Event details
    # PUT    /api/events/{id}/                     - Update event
    # DELETE /api/events/{id}/                     - Delete event and its check-ins
    # POST   /api/events/{id}/check-in/            - Check a person in
    # GET    /api/events/{id}/attendance/          - Check-ins, latest first
    # GET    /api/events/{id}/search-attendees/    - Phone lookup (phone)
    # GET    /api/events/{id}/newcomers/           - People registered at the event

    path('', include(router.urls)),
]
