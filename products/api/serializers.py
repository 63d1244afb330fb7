"""Products API serializers (read-only views of the static catalog)."""

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    description = serializers.CharField(read_only=True)
    image = serializers.URLField(read_only=True)
    in_stock = serializers.BooleanField(read_only=True)


class ProductPriceSerializer(serializers.Serializer):
    """Name and unit price, as shown on the order form."""

    name = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
