from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'users'

router = DefaultRouter()
router.register(r'addresses', views.AddressViewSet, basename='address')

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),

    # User profile
    path('user/', views.current_user, name='current-user'),
    path('addresses/<uuid:pk>/set-default/', views.set_default, name='address-set-default'),

    # Back office
    path('admin/clients/', views.ClientListView.as_view(), name='client-list'),
    path('admin/clients/<uuid:pk>/', views.ClientDetailView.as_view(), name='client-detail'),
    path('admin/employees/', views.employees, name='employees'),

    path('', include(router.urls)),
]
