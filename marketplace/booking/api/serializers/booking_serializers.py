from rest_framework import serializers

from marketplace.booking.domain.models.booking import BookerEntry, Booking


class BookerEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = BookerEntry
        fields = ["booker_name", "booker_email", "booker_location", "booker_number", "created_at"]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """
    Booking document.

    ``bookers`` renders ``visible_bookers`` as prepared by BookingService, so a
    buyer's listing only ever contains that buyer's own entry.
    """

    bookers = serializers.SerializerMethodField()
    state = serializers.CharField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "product_id",
            "product_name",
            "price",
            "image",
            "seller_email",
            "seller_contact",
            "is_paid",
            "bought_by",
            "seller_removed",
            "state",
            "bookers",
            "created_at",
        ]
        read_only_fields = fields

    def get_bookers(self, obj):
        entries = getattr(obj, "visible_bookers", None)
        if entries is None:
            return []
        return BookerEntrySerializer(entries, many=True).data


class ReserveRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    booker_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    booker_location = serializers.CharField(max_length=200, required=False, allow_blank=True)
    booker_number = serializers.CharField(max_length=40, required=False, allow_blank=True)
