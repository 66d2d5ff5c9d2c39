from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsEmployeeRole, IsStaffRole

from .serializers import (
    ProductBatchCreateSerializer,
    ProductCreateSerializer,
    ProductSerializer,
    ReceptionCreateSerializer,
    ReceptionSerializer,
)
from .services import ProductManager, ReceptionManager


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()


@extend_schema(
    request=ReceptionCreateSerializer,
    responses={
        201: ReceptionSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Open a new reception at a PVZ. Fails if one is already in progress.",
    tags=['receptions'],
)
@api_view(['POST'])
@permission_classes([IsEmployeeRole])
def create_reception(request):
    """Open a reception."""
    serializer = ReceptionCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    reception = ReceptionManager().create(pvz_id=serializer.validated_data['pvz_id'])

    return Response(ReceptionSerializer(reception).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ReceptionCreateSerializer,
    responses={
        200: ReceptionSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Close the reception in progress at a PVZ.",
    tags=['receptions'],
)
@api_view(['POST'])
@permission_classes([IsEmployeeRole])
def close_reception(request):
    """Close the open reception of a PVZ."""
    serializer = ReceptionCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    reception = ReceptionManager().close(pvz_id=serializer.validated_data['pvz_id'])

    return Response(ReceptionSerializer(reception).data)


@extend_schema(
    responses={200: ProductSerializer(many=True), 404: ErrorResponseSerializer},
    description="List the products of a reception in the order they were added.",
    tags=['receptions'],
)
@api_view(['GET'])
@permission_classes([IsStaffRole])
def reception_products(request, reception_id):
    """Get products of a reception."""
    products = ReceptionManager().get_products(reception_id=reception_id)
    return Response(ProductSerializer(products, many=True).data)


@extend_schema(
    request=ProductCreateSerializer,
    responses={
        201: ProductSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Add a product to the reception in progress at a PVZ.",
    tags=['products'],
)
@api_view(['POST'])
@permission_classes([IsEmployeeRole])
def create_product(request):
    """Add one product."""
    serializer = ProductCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    product = ProductManager().create_for_pvz(
        pvz_id=serializer.validated_data['pvz_id'],
        product_type=serializer.validated_data['type'],
    )

    return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=ProductBatchCreateSerializer,
    responses={
        201: ProductSerializer(many=True),
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Add several products to a reception in one transaction.",
    tags=['products'],
)
@api_view(['POST'])
@permission_classes([IsEmployeeRole])
def create_product_batch(request):
    """Add products in bulk, all or nothing."""
    serializer = ProductBatchCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    products = ProductManager().create_batch(
        reception_id=serializer.validated_data['reception_id'],
        product_types=serializer.validated_data['types'],
    )

    return Response(ProductSerializer(products, many=True).data, status=status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={
        200: ProductSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description="Remove the most recently added product of an open reception.",
    tags=['products'],
)
@api_view(['DELETE'])
@permission_classes([IsEmployeeRole])
def delete_last_product(request, reception_id):
    """Delete the last product (LIFO)."""
    product = ProductManager().delete_last(reception_id=reception_id)
    return Response(ProductSerializer(product).data)
