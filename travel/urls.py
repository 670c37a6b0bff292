# travel/urls.py

from django.urls import path
from . import views

urlpatterns = [
    # 1. Home (upcoming trips)
    path('', views.index, name='index'),

    # --- Account URLs ---
    path('account/login/', views.login_view, name='login'),
    path('account/register/', views.register_view, name='register'),
    path('account/logout/', views.logout_view, name='logout'),
    path('account/profile/', views.profile, name='profile'),
    path('account/password/', views.change_password, name='change_password'),

    # --- Destination URLs ---
    path('destinations/', views.destination_list, name='destination_list'),
    path('destinations/new/', views.destination_create, name='destination_create'),
    path('destinations/<int:pk>/edit/', views.destination_update, name='destination_update'),
    path('destinations/<int:pk>/delete/', views.destination_delete, name='destination_delete'),

    # --- Trip URLs ---
    path('trips/', views.trip_list, name='trip_list'),
    path('trips/new/', views.trip_create, name='trip_create'),
    path('trips/<int:pk>/', views.trip_detail, name='trip_detail'),
    path('trips/<int:pk>/edit/', views.trip_update, name='trip_update'),
    path('trips/<int:pk>/delete/', views.trip_delete, name='trip_delete'),
    path('trips/<int:pk>/book/', views.trip_book, name='trip_book'),
    path('trips/<int:pk>/guides/<int:guide_id>/assign/', views.trip_assign_guide, name='trip_assign_guide'),
    path('trips/<int:pk>/guides/<int:guide_id>/remove/', views.trip_remove_guide, name='trip_remove_guide'),

    # --- Guide URLs ---
    path('guides/', views.guide_list, name='guide_list'),
    path('guides/new/', views.guide_create, name='guide_create'),
    path('guides/<int:pk>/edit/', views.guide_update, name='guide_update'),
    path('guides/<int:pk>/delete/', views.guide_delete, name='guide_delete'),

    # --- Booking URLs ---
    path('bookings/', views.my_bookings, name='my_bookings'),
    path('bookings/all/', views.registration_list, name='registration_list'),
    path('bookings/<int:pk>/cancel/', views.registration_cancel, name='registration_cancel'),
    path('bookings/<int:pk>/confirm/', views.registration_confirm, name='registration_confirm'),

    # --- Diagnostics ---
    path('api-test/', views.api_test, name='api_test'),
]
