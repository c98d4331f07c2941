from rest_framework import serializers

from .models import Ride


class RideSerializer(serializers.ModelSerializer):
    """Public ride representation"""
    userId = serializers.IntegerField(source='rider_id', read_only=True)
    driverId = serializers.IntegerField(source='driver_id', read_only=True, allow_null=True)
    pickupLocation = serializers.CharField(source='pickup_location', read_only=True)
    dropLocation = serializers.CharField(source='drop_location', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Ride
        fields = ['id', 'userId', 'driverId', 'pickupLocation', 'dropLocation', 'status', 'createdAt']
        read_only_fields = fields


class RideCreateSerializer(serializers.Serializer):
    """Serializer for creating ride requests"""
    pickupLocation = serializers.CharField(source='pickup_location', max_length=255)
    dropLocation = serializers.CharField(source='drop_location', max_length=255)
