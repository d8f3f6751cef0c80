"""
URL configuration for the Boutique project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check (for Render)
    path('api/health/', health_check, name='health-check'),

    # Django admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API endpoints
    path('api/settings/', include('apps.siteconfig.urls')),
    path('api/currency/', include('apps.currency.urls')),
    path('api/catalog/', include('apps.catalog.urls')),
    path('api/imports/', include('apps.imports.urls')),
    path('api/streaming/', include('apps.streaming.urls')),
    path('api/orders/', include('apps.orders.urls')),
    path('api/quotes/', include('apps.quotes.urls')),
    path('api/messages/', include('apps.messaging.urls')),
    path('api/tasks/', include('apps.tasks.urls')),
    path('api/analytics/', include('apps.analytics.urls')),
]

# Media files (development only)
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
