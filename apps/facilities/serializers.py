"""Serializers for the facilities API."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import Booking, Resource, ResourceType, WaitlistEntry

User = get_user_model()


class ResourceSerializer(serializers.ModelSerializer):
    hostelId = serializers.UUIDField(source="hostel_id", read_only=True)
    isOperational = serializers.BooleanField(source="is_operational", read_only=True)
    maintenance = serializers.CharField(source="maintenance_note", read_only=True)

    class Meta:
        model = Resource
        fields = ["id", "hostelId", "type", "name", "isOperational", "maintenance"]
        read_only_fields = ["id", "type", "name"]


class ResourceStatusSerializer(serializers.Serializer):
    """Resource enriched with its derived live status."""

    id = serializers.UUIDField(source="resource.id")
    hostelId = serializers.UUIDField(source="resource.hostel_id")
    type = serializers.CharField(source="resource.type")
    name = serializers.CharField(source="resource.name")
    isOperational = serializers.BooleanField(source="resource.is_operational")
    maintenance = serializers.CharField(source="resource.maintenance_note")
    liveStatus = serializers.CharField(source="live_status")
    currentUser = serializers.CharField(source="current_user", allow_null=True)
    availableAt = serializers.DateTimeField(source="available_at", allow_null=True)
    slotsLeft = serializers.IntegerField(source="slots_left")


class ResourceCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    type = serializers.ChoiceField(choices=ResourceType.choices)
    hostelId = serializers.UUIDField(required=False)


class ResourceStatusUpdateSerializer(serializers.Serializer):
    isOperational = serializers.BooleanField()
    maintenance = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class SlotSerializer(serializers.Serializer):
    startTime = serializers.DateTimeField(source="start")
    endTime = serializers.DateTimeField(source="end")


class BookingSerializer(serializers.ModelSerializer):
    resourceId = serializers.UUIDField(source="resource_id", read_only=True)
    userId = serializers.IntegerField(source="user_id", read_only=True)
    startTime = serializers.DateTimeField(source="start_time", read_only=True)
    endTime = serializers.DateTimeField(source="end_time", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Booking
        fields = ["id", "resourceId", "userId", "startTime", "endTime", "status", "createdAt"]
        read_only_fields = fields


class ActiveBookingSerializer(BookingSerializer):
    """Admin listing row with the holder and machine names."""

    userName = serializers.CharField(source="user.display_name", read_only=True)
    userEmail = serializers.EmailField(source="user.email", read_only=True)
    machineName = serializers.CharField(source="resource.name", read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = BookingSerializer.Meta.fields + ["userName", "userEmail", "machineName"]
        read_only_fields = fields


class BookSlotSerializer(serializers.Serializer):
    resourceId = serializers.UUIDField()
    startTime = serializers.DateTimeField()
    endTime = serializers.DateTimeField()

    def validate(self, attrs):  # type: ignore
        if attrs["startTime"] >= attrs["endTime"]:
            raise serializers.ValidationError("End time must be after start time.")
        return attrs


class BypassBookSerializer(BookSlotSerializer):
    userId = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())

    def validate_userId(self, user):  # type: ignore
        hostel_id = self.context.get("hostel_id")
        if hostel_id is not None and user.hostel_id != hostel_id:
            raise serializers.ValidationError("User belongs to another hostel.")
        return user


class WaitlistJoinSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=ResourceType.choices)


class WaitlistEntrySerializer(serializers.ModelSerializer):
    userId = serializers.IntegerField(source="user_id", read_only=True)
    hostelId = serializers.UUIDField(source="hostel_id", read_only=True)
    joinedAt = serializers.DateTimeField(source="joined_at", read_only=True)

    class Meta:
        model = WaitlistEntry
        fields = ["id", "userId", "hostelId", "type", "status", "joinedAt"]
        read_only_fields = fields


class WaitlistListingSerializer(WaitlistEntrySerializer):
    userName = serializers.CharField(source="user.display_name", read_only=True)
    userEmail = serializers.EmailField(source="user.email", read_only=True)

    class Meta(WaitlistEntrySerializer.Meta):
        fields = WaitlistEntrySerializer.Meta.fields + ["userName", "userEmail"]
        read_only_fields = fields
