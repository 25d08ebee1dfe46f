from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import BadgeStatusSerializer
from .services import (
    get_badge_statuses,
    get_badge,
    is_badge_earned,
    BadgeNotFoundError,
)
from apps.rewards.services import get_user_stats


def _with_earned(badge, earned):
    badge.earned = earned
    return badge


@extend_schema(
    responses={200: BadgeStatusSerializer(many=True)},
    description="Active badges with the caller's earned flag, evaluated from the ledger.",
    tags=['badges'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def badge_list(request):
    """List active badges for the authenticated user."""
    badges = [_with_earned(badge, earned) for badge, earned in get_badge_statuses(user=request.user)]
    return Response(BadgeStatusSerializer(badges, many=True).data)


@extend_schema(
    responses={200: BadgeStatusSerializer},
    description="A single active badge with the caller's earned flag.",
    tags=['badges'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def badge_detail(request, badge_id):
    """Get one badge for the authenticated user."""
    try:
        badge = get_badge(badge_id=badge_id)
    except BadgeNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    earned = is_badge_earned(badge, get_user_stats(user=request.user))
    return Response(BadgeStatusSerializer(_with_earned(badge, earned)).data)
