from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    ScanSubmitSerializer,
    ScanAcceptedSerializer,
    ScanRejectedSerializer,
    ScannedUnitSerializer,
)
from .services import (
    submit_scan as submit_scan_service,
    get_user_scans,
    RejectionReason,
    ScanRejectedError,
    InvalidFormatError,
)


REJECTION_STATUS = {
    RejectionReason.INVALID_FORMAT: status.HTTP_400_BAD_REQUEST,
    RejectionReason.INVALID_UUID: status.HTTP_400_BAD_REQUEST,
    RejectionReason.ALREADY_SCANNED: status.HTTP_409_CONFLICT,
    RejectionReason.UNKNOWN_UNIT: status.HTTP_404_NOT_FOUND,
    RejectionReason.REGISTRY_UNREACHABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class ScanPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def rejection_response(error: ScanRejectedError) -> Response:
    """Translate a scan rejection into its stable JSON shape and HTTP status."""
    data = ScanRejectedSerializer({
        'accepted': False,
        'reason': error.reason,
        'detail': error.detail,
        'retryable': error.retryable,
    }).data
    response = Response(data, status=REJECTION_STATUS[error.reason])
    if error.retryable:
        response['Retry-After'] = '5'
    return response


@extend_schema(
    request=ScanSubmitSerializer,
    responses={
        201: ScanAcceptedSerializer,
        400: ScanRejectedSerializer,
        404: ScanRejectedSerializer,
        409: ScanRejectedSerializer,
        503: ScanRejectedSerializer,
    },
    description=(
        "Submit a scanned warranty code. Each physical unit earns points "
        "once; branch on `reason` when `accepted` is false."
    ),
    tags=['scans'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def submit_scan(request):
    """Claim the unit named by a scanned code for the authenticated user."""
    serializer = ScanSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return rejection_response(InvalidFormatError())

    try:
        result = submit_scan_service(
            raw_code=serializer.validated_data['code'],
            user=request.user,
        )
    except ScanRejectedError as e:
        return rejection_response(e)

    data = ScanAcceptedSerializer({
        'accepted': True,
        'unit_id': result.unit_id,
        'product_name': result.product_name,
        'points_awarded': result.points_awarded,
        'new_balance': result.new_balance,
        'badges': result.badges,
    }).data
    return Response(data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: ScannedUnitSerializer(many=True)},
    description="Units claimed by the caller, newest first.",
    tags=['scans'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_scans(request):
    """List the authenticated user's claimed units."""
    paginator = ScanPagination()
    page = paginator.paginate_queryset(get_user_scans(user=request.user), request)
    serializer = ScannedUnitSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)
