from rest_framework import serializers

from marketplace.catalog.domain.models.catalog import Product


class ProductSerializer(serializers.ModelSerializer):
    """Full product document, as stored."""

    category_id = serializers.CharField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "image",
            "location",
            "seller_email",
            "seller_phone",
            "category_id",
            "resale_price",
            "original_price",
            "condition",
            "years_of_use",
            "is_advertised",
            "created_at",
        ]
        read_only_fields = fields


class EnrichedProductSerializer(serializers.Serializer):
    """Public listing entry: the seller's name and badge, never their email."""

    id = serializers.CharField()
    name = serializers.CharField()
    description = serializers.CharField()
    image = serializers.CharField()
    location = serializers.CharField()
    category_id = serializers.CharField()
    resale_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    original_price = serializers.DecimalField(max_digits=10, decimal_places=2, allow_null=True)
    condition = serializers.CharField()
    years_of_use = serializers.IntegerField()
    seller_phone = serializers.CharField()
    is_advertised = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    seller_name = serializers.CharField(allow_null=True)
    seller_verified = serializers.BooleanField()


class ProductCreateSerializer(serializers.Serializer):
    """Input for listing a new product; the seller is always the caller."""

    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.URLField(required=False, allow_blank=True, max_length=500)
    location = serializers.CharField(required=False, allow_blank=True, max_length=200)
    seller_phone = serializers.CharField(required=False, allow_blank=True, max_length=40)
    category_id = serializers.CharField(max_length=100)
    resale_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    original_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    condition = serializers.ChoiceField(choices=Product.CONDITION_CHOICES, required=False)
    years_of_use = serializers.IntegerField(min_value=0, required=False)
