from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsAdminRole, IsEmployeeRole, IsStaffRole
from apps.receptions.serializers import ProductSerializer, ReceptionSerializer
from apps.receptions.services import ProductManager, ReceptionManager

from .serializers import (
    PVZListQuerySerializer,
    PVZSerializer,
    PVZWithReceptionsSerializer,
    PVZWriteSerializer,
)
from .services import PVZManager


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()


class PVZViewSet(viewsets.ViewSet):
    """
    ViewSet for pickup points.

    list: PVZ with receptions and products, filtered by reception date
    create: Create a PVZ (admin)
    retrieve: Get a PVZ
    update: Rename a PVZ (admin)
    destroy: Delete a PVZ without receptions (admin)
    close_last_reception: Close the open reception (employee)
    delete_last_product: Remove the last product of the open reception (employee)
    """

    lookup_value_regex = '[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}'

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action in ['create', 'update', 'destroy']:
            return [IsAdminRole()]
        if self.action in ['close_last_reception', 'delete_last_product']:
            return [IsEmployeeRole()]
        return [IsStaffRole()]

    @extend_schema(
        parameters=[
            OpenApiParameter('start_date', str, description='Reception date lower bound (ISO 8601)'),
            OpenApiParameter('end_date', str, description='Reception date upper bound (ISO 8601)'),
            OpenApiParameter('page', int, description='Page number, from 1'),
            OpenApiParameter('limit', int, description='Page size'),
        ],
        responses={200: PVZWithReceptionsSerializer(many=True), 400: ErrorResponseSerializer},
        tags=['pvz'],
    )
    def list(self, request):
        """List PVZ with their receptions and products."""
        query = PVZListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        pvzs = PVZManager().get_with_receptions(
            start_date=query.validated_data.get('start_date'),
            end_date=query.validated_data.get('end_date'),
            page=query.validated_data['page'],
            limit=query.validated_data['limit'],
        )

        return Response(PVZWithReceptionsSerializer(pvzs, many=True).data)

    @extend_schema(
        request=PVZWriteSerializer,
        responses={
            201: PVZSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['pvz'],
    )
    def create(self, request):
        """Create a new PVZ."""
        serializer = PVZWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pvz = PVZManager().create(
            city=serializer.validated_data['city'],
            user_id=request.user.id,
        )

        return Response(PVZSerializer(pvz).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: PVZSerializer, 404: ErrorResponseSerializer}, tags=['pvz'])
    def retrieve(self, request, pk=None):
        """Get a PVZ."""
        pvz = PVZManager().get_by_id(pvz_id=pk)
        return Response(PVZSerializer(pvz).data)

    @extend_schema(
        request=PVZWriteSerializer,
        responses={
            200: PVZSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=['pvz'],
    )
    def update(self, request, pk=None):
        """Rename a PVZ."""
        serializer = PVZWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        pvz = PVZManager().update(
            pvz_id=pk,
            city=serializer.validated_data['city'],
            moderator_id=request.user.id,
        )

        return Response(PVZSerializer(pvz).data)

    @extend_schema(responses={204: None, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer}, tags=['pvz'])
    def destroy(self, request, pk=None):
        """Delete a PVZ."""
        PVZManager().delete(pvz_id=pk, moderator_id=request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={200: ReceptionSerializer, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer},
        tags=['pvz'],
    )
    @action(detail=True, methods=['post'])
    def close_last_reception(self, request, pk=None):
        """Close the reception in progress at this PVZ."""
        reception = ReceptionManager().close(pvz_id=pk)
        return Response(ReceptionSerializer(reception).data)

    @extend_schema(
        request=None,
        responses={200: ProductSerializer, 404: ErrorResponseSerializer, 409: ErrorResponseSerializer},
        tags=['pvz'],
    )
    @action(detail=True, methods=['post'])
    def delete_last_product(self, request, pk=None):
        """Remove the most recently added product of the open reception."""
        product = ProductManager().delete_last_for_pvz(pvz_id=pk)
        return Response(ProductSerializer(product).data)
