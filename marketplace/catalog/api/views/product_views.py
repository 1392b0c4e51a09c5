import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import SellerRequired
from infrastructure.container import container
from marketplace.api.responses import error_response, outcome_response, validation_response
from marketplace.catalog.api.serializers.product_serializers import (
    EnrichedProductSerializer,
    ProductCreateSerializer,
    ProductSerializer,
)
from marketplace.catalog.api.views.category_views import wants_enriched
from marketplace.catalog.domain.services.catalog_service import CatalogService


logger = logging.getLogger(__name__)


class ProductViewSet(viewsets.ViewSet):
    """
    Product endpoints. Writes delegate the role and ownership checks to
    CatalogService so the API and direct service callers behave the same.
    """

    lookup_value_regex = "[0-9a-fA-F-]{36}"

    def get_permissions(self):
        if self.action == "advertised":
            return [AllowAny()]
        if self.action == "mine":
            return [SellerRequired()]
        return [IsAuthenticated()]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    def create(self, request):
        serializer = ProductCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        result = self.get_service().create_product(request.user, serializer.validated_data)
        return outcome_response(result, success_status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        result = self.get_service().delete_product(pk, request.user)
        return outcome_response(result)

    @action(detail=False, methods=["get"])
    def advertised(self, request):
        enriched = wants_enriched(request)
        result = self.get_service().list_advertised(enriched=enriched)
        if not result.ok:
            return error_response(result)

        serializer_class = EnrichedProductSerializer if enriched else ProductSerializer
        return Response(serializer_class(result.value, many=True).data)

    @action(detail=False, methods=["get"])
    def mine(self, request):
        result = self.get_service().list_by_seller(request.user.email)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value, many=True).data)

    @action(detail=True, methods=["patch"])
    def advertise(self, request, pk=None):
        result = self.get_service().set_advertised(pk, request.user)
        return outcome_response(result)
