from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('dummy-login/', views.dummy_login, name='dummy-login'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
]
