from rest_framework import serializers

from .models import Product, ProductType, Reception


class ProductTypeField(serializers.ChoiceField):
    """Choice field that also accepts the display labels (электроника, ...)."""

    def __init__(self, **kwargs):
        super().__init__(choices=ProductType.choices, **kwargs)

    def to_internal_value(self, data):
        return super().to_internal_value(ProductType.normalize(data))


class ProductSerializer(serializers.ModelSerializer):
    """Product as stored: insertion order is exposed as `sequence`."""

    reception_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id',
            'date_time',
            'type',
            'reception_id',
            'sequence',
        ]
        read_only_fields = fields


class ReceptionSerializer(serializers.ModelSerializer):
    pvz_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Reception
        fields = [
            'id',
            'date_time',
            'pvz_id',
            'status',
        ]
        read_only_fields = fields


class ReceptionWithProductsSerializer(ReceptionSerializer):
    """
    Reception with its products.

    Reads the prefetched `ordered_products` attribute when present
    (PVZ listing) and falls back to a query otherwise.
    """

    products = serializers.SerializerMethodField()

    class Meta(ReceptionSerializer.Meta):
        fields = ReceptionSerializer.Meta.fields + ['products']
        read_only_fields = fields

    def get_products(self, obj):
        products = getattr(obj, 'ordered_products', None)
        if products is None:
            products = obj.products.order_by('sequence')
        return ProductSerializer(products, many=True).data


class ReceptionCreateSerializer(serializers.Serializer):
    """Input for opening or closing the reception of a PVZ."""

    pvz_id = serializers.UUIDField()


class ProductCreateSerializer(serializers.Serializer):
    """Input for adding one product to the open reception of a PVZ."""

    pvz_id = serializers.UUIDField()
    type = ProductTypeField()


class ProductBatchCreateSerializer(serializers.Serializer):
    """Input for adding several products to a reception at once."""

    reception_id = serializers.UUIDField()
    types = serializers.ListField(
        child=ProductTypeField(),
        allow_empty=False,
    )
