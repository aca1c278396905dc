from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'households'

router = DefaultRouter()
router.register(r'', views.HouseholdViewSet, basename='household')

urlpatterns = [
    # GET    /api/households/        - Paginated list
    # POST   /api/households/        - Create household and link members
    # GET    /api/households/{id}/   - Household details
    # PUT    /api/households/{id}/   - Update household and re-link members
    # DELETE /api/households/{id}/   - Delete household, members stay

    path('', include(router.urls)),
]
