from django.urls import path
from . import views

app_name = 'receptions'

urlpatterns = [
    # POST /api/receptions/                       - Open reception
    # POST /api/receptions/close/                 - Close open reception
    # GET  /api/receptions/{id}/products/         - Products of a reception
    path('', views.create_reception, name='create'),
    path('close/', views.close_reception, name='close'),
    path('<uuid:reception_id>/products/', views.reception_products, name='products'),
]
