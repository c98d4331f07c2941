"""Tells what to show in the Django admin interface for rides app"""

from django.contrib import admin
from .models import Ride


@admin.register(Ride)
class RideAdmin(admin.ModelAdmin):
    """Ride admin"""
    list_display = ['id', 'rider', 'driver', 'status', 'pickup_location', 'drop_location', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['rider__username', 'driver__username', 'pickup_location', 'drop_location']
    # Status changes go through the ride service only
    readonly_fields = ['rider', 'driver', 'status', 'created_at']
    date_hierarchy = 'created_at'
