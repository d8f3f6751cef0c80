from django.urls import path
from . import views

app_name = 'messaging'

urlpatterns = [
    path('contact/', views.contact, name='contact'),
    path('', views.my_messages, name='my-messages'),
    path('unread-count/', views.unread, name='unread-count'),
    path('admin/', views.admin_inbox, name='admin-inbox'),
    path('<uuid:pk>/', views.message_detail, name='message-detail'),
    path('<uuid:pk>/reply/', views.reply, name='message-reply'),
    path('<uuid:pk>/read/', views.read, name='message-read'),
    path('<uuid:pk>/archive/', views.archive, name='message-archive'),
]
