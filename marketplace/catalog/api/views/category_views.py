import logging

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.responses import error_response
from marketplace.catalog.api.serializers.category_serializers import CategorySerializer
from marketplace.catalog.api.serializers.product_serializers import EnrichedProductSerializer, ProductSerializer
from marketplace.catalog.domain.services.catalog_service import CatalogService


logger = logging.getLogger(__name__)

TRUTHY = ("1", "true", "yes")


def wants_enriched(request) -> bool:
    return request.query_params.get("enriched", "").lower() in TRUTHY


class CategoryViewSet(viewsets.ViewSet):
    """
    ViewSet for categories - read-only operations using Service Layer
    """

    permission_classes = [AllowAny]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    def list(self, request):
        result = self.get_service().list_categories()
        if not result.ok:
            return error_response(result)
        return Response(CategorySerializer(result.value, many=True).data)

    def retrieve(self, request, pk=None):
        result = self.get_service().get_category(pk)
        if not result.ok:
            return error_response(result)
        return Response(CategorySerializer(result.value).data)

    @action(detail=True, methods=["get"])
    def products(self, request, pk=None):
        """Products in the category; ``?enriched=1`` adds seller name and badge."""
        enriched = wants_enriched(request)
        result = self.get_service().list_by_category(pk, enriched=enriched)
        if not result.ok:
            return error_response(result)

        serializer_class = EnrichedProductSerializer if enriched else ProductSerializer
        return Response(serializer_class(result.value, many=True).data)
