from rest_framework import serializers

from marketplace.catalog.api.serializers.product_serializers import ProductSerializer


class ReportRequestSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()


class ReportedProductSerializer(serializers.Serializer):
    report_id = serializers.IntegerField()
    reported_by = serializers.CharField()
    product = ProductSerializer()
