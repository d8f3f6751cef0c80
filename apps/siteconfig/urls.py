from django.urls import path
from . import views

app_name = 'siteconfig'

urlpatterns = [
    path('', views.public_settings, name='public-settings'),
    path('admin/', views.admin_settings, name='admin-settings'),
]
