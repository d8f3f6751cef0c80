from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'streaming'

router = DefaultRouter()
router.register(r'platforms', views.PlatformViewSet, basename='platform')
router.register(r'accounts', views.StreamingAccountViewSet, basename='account')
router.register(r'profiles', views.AccountProfileViewSet, basename='profile')
router.register(r'offers', views.OfferViewSet, basename='offer')
router.register(r'subscriptions', views.SubscriptionViewSet, basename='subscription')
router.register(r'gift-cards', views.GiftCardViewSet, basename='gift-card')

urlpatterns = [
    path('gift-cards/redeem/', views.redeem_gift_card_view, name='gift-card-redeem'),
    path('', include(router.urls)),
]
