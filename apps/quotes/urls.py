from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'quotes'

router = DefaultRouter()
router.register(r'quotes', views.QuoteViewSet, basename='quote')

urlpatterns = [
    path('', include(router.urls)),
]
