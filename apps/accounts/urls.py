from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.LoginView.as_view(), name='login'),
    
    # User profile
    path('user/', views.current_user, name='current-user'),
]
