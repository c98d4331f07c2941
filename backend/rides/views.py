from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from services.ride_management import ride_lifecycle
from .serializers import RideSerializer, RideCreateSerializer


class RideCreateView(APIView):
    """
    POST: Rider requests a ride.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = RideCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ride = ride_lifecycle.request_ride(
            request.user.username,
            pickup_location=serializer.validated_data['pickup_location'],
            drop_location=serializer.validated_data['drop_location'],
        )

        return Response(RideSerializer(ride).data, status=status.HTTP_201_CREATED)


class PendingRidesView(APIView):
    """
    GET: Driver lists rides waiting for a driver.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        rides = ride_lifecycle.list_pending_rides(request.user.username)
        return Response(RideSerializer(rides, many=True).data)


class AcceptRideView(APIView):
    """
    POST: Driver accepts a pending ride.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, ride_id: int):
        ride = ride_lifecycle.accept_ride(request.user.username, ride_id)
        return Response(RideSerializer(ride).data)


class CompleteRideView(APIView):
    """
    POST: Rider or assigned driver completes an accepted ride.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, ride_id: int):
        ride = ride_lifecycle.complete_ride(request.user.username, ride_id)
        return Response(RideSerializer(ride).data)


class MyRidesView(APIView):
    """
    GET: Rider lists their own rides.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        rides = ride_lifecycle.list_my_rides(request.user.username)
        return Response(RideSerializer(rides, many=True).data)
