from rest_framework import serializers


class PaymentIntentRequestSerializer(serializers.Serializer):
    price = serializers.DecimalField(max_digits=10, decimal_places=2)


class PaymentIntentResponseSerializer(serializers.Serializer):
    client_secret = serializers.CharField(allow_null=True)
    intent_id = serializers.CharField()
    amount = serializers.IntegerField()
    currency = serializers.CharField()


class PaymentRecordSerializer(serializers.Serializer):
    """A completed payment reported by the buyer's client after the gateway confirmed it."""

    product_id = serializers.UUIDField()
    booking_id = serializers.IntegerField(min_value=1)
    transaction_id = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
