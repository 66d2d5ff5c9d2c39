from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'pvz'

router = SimpleRouter()
router.register(r'', views.PVZViewSet, basename='pvz')

urlpatterns = [
    # GET    /api/pvz/                              - List PVZ with receptions
    # POST   /api/pvz/                              - Create PVZ
    # GET    /api/pvz/{id}/                         - Get PVZ
    # PUT    /api/pvz/{id}/                         - Rename PVZ
    # DELETE /api/pvz/{id}/                         - Delete PVZ

    # Custom actions
    # POST   /api/pvz/{id}/close_last_reception/    - Close open reception
    # POST   /api/pvz/{id}/delete_last_product/     - Remove last product
    path('', include(router.urls)),
]
