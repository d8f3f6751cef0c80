from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'categories', views.CategoryViewSet, basename='category')
router.register(r'products', views.ProductViewSet, basename='product')
router.register(r'services', views.ServiceViewSet, basename='service')

urlpatterns = [
    path('search/', views.search, name='search'),
    path('', include(router.urls)),
]
