from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'orders', views.OrderViewSet, basename='order')
router.register(r'returns', views.ReturnViewSet, basename='return')

urlpatterns = [
    path('cart/', views.cart_detail, name='cart'),
    path('cart/items/', views.cart_add, name='cart-add'),
    path('cart/items/<uuid:pk>/', views.cart_item, name='cart-item'),
    path('cart/clear/', views.cart_clear, name='cart-clear'),
    path('cart/checkout/', views.cart_checkout, name='cart-checkout'),
    path('track/', views.track, name='track'),
    path('', include(router.urls)),
]
