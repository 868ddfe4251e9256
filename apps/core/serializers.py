"""Serializers for the JSON sub-documents shared by farmers, fields and workers."""
from rest_framework import serializers


class CoordinatesSerializer(serializers.Serializer):
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()


class AddressSerializer(serializers.Serializer):
    """Postal address with optional map coordinates."""
    full = serializers.CharField(allow_blank=True)
    detail = serializers.CharField(required=False, allow_blank=True)
    zipcode = serializers.CharField(required=False, allow_blank=True)
    subdistrict = serializers.CharField(required=False, allow_blank=True)
    coordinates = CoordinatesSerializer(required=False)


class BankInfoSerializer(serializers.Serializer):
    bank_name = serializers.CharField(allow_blank=True)
    account_number = serializers.CharField(allow_blank=True)
    account_holder = serializers.CharField(allow_blank=True)
