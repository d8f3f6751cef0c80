from django.urls import path
from . import views

app_name = 'currency'

urlpatterns = [
    path('rates/', views.rates, name='rates'),
    path('convert/', views.convert_amount, name='convert'),
    path('admin/rates/', views.update_rates, name='update-rates'),
    path('admin/sync/', views.sync_rates, name='sync-rates'),
]
