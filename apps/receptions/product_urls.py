from django.urls import path
from . import views

app_name = 'products'

urlpatterns = [
    # POST   /api/products/                       - Add product to open reception
    # POST   /api/products/batch/                 - Add products in bulk
    # DELETE /api/products/last/{reception_id}/   - Remove last product
    path('', views.create_product, name='create'),
    path('batch/', views.create_product_batch, name='batch'),
    path('last/<uuid:reception_id>/', views.delete_last_product, name='delete-last'),
]
