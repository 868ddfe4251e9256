from rest_framework import serializers
from .models import Category, Rate, PaymentGroup, CropType, WorkType


class RateSerializer(serializers.ModelSerializer):
    """Serializer for category rates."""

    class Meta:
        model = Rate
        fields = [
            'id',
            'name',
            'description',
            'default_price',
            'unit',
            'created_at',
        ]
        read_only_fields = ['id', 'created_at']


class RateCreateSerializer(serializers.Serializer):
    """Input for adding a rate to a category."""
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    default_price = serializers.DecimalField(max_digits=14, decimal_places=2)
    unit = serializers.CharField(max_length=20, allow_blank=True)


class RateUpdateSerializer(serializers.Serializer):
    """Input for merging fields into an existing rate."""
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    default_price = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    unit = serializers.CharField(max_length=20, required=False, allow_blank=True)


class CategorySerializer(serializers.ModelSerializer):
    """Main serializer for categories."""

    rates = RateSerializer(many=True, read_only=True)
    next_category_name = serializers.CharField(source='next_category.name', read_only=True, default=None)

    class Meta:
        model = Category
        fields = [
            'id',
            'name',
            'description',
            'next_category',
            'next_category_name',
            'order',
            'rates',
            'created_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CategoryCreateSerializer(serializers.Serializer):
    """Input for creating a category."""
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    next_category = serializers.UUIDField(required=False, allow_null=True, default=None)


class CategoryUpdateSerializer(serializers.Serializer):
    """Input for updating category name/description."""
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)


class SetNextCategorySerializer(serializers.Serializer):
    next_category = serializers.UUIDField(allow_null=True)


class MoveCategorySerializer(serializers.Serializer):
    direction = serializers.ChoiceField(choices=['up', 'down'])


class ReorderCategoriesSerializer(serializers.Serializer):
    ordered_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class PaymentGroupSerializer(serializers.ModelSerializer):

    class Meta:
        model = PaymentGroup
        fields = ['id', 'name', 'created_by', 'created_at']
        read_only_fields = ['id', 'created_by', 'created_at']


class CropTypeSerializer(serializers.ModelSerializer):

    class Meta:
        model = CropType
        fields = ['id', 'name', 'created_by', 'created_at']
        read_only_fields = ['id', 'created_by', 'created_at']


class WorkTypeSerializer(serializers.ModelSerializer):

    class Meta:
        model = WorkType
        fields = ['id', 'name', 'created_by', 'created_at']
        read_only_fields = ['id', 'created_by', 'created_at']


class LookupsSerializer(serializers.Serializer):
    """Every catalog lookup in one payload."""
    categories = CategorySerializer(many=True)
    payment_groups = PaymentGroupSerializer(many=True)
    crop_types = CropTypeSerializer(many=True)
    work_types = WorkTypeSerializer(many=True)


class LookupValueInputSerializer(serializers.Serializer):
    """Input for creating or renaming a lookup value."""
    name = serializers.CharField(max_length=100, allow_blank=True)
