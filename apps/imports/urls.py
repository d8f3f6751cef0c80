from django.urls import path
from . import views

app_name = 'imports'

urlpatterns = [
    path('calculate/', views.calculate, name='calculate'),
    path('admin/calculate/', views.admin_calculate, name='admin-calculate'),
    path('admin/settings/', views.admin_settings, name='admin-settings'),
    path('admin/products/', views.admin_create_product, name='admin-create-product'),
]
