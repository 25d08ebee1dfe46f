from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.models import User
from apps.accounts.permissions import IsProgramAdmin

from .serializers import (
    TransactionSerializer,
    RewardSerializer,
    BalanceSerializer,
    LedgerResultSerializer,
    RedeemRewardSerializer,
    AllocatePointsSerializer,
)
from .services import (
    get_user_stats,
    level_progress,
    get_user_transactions,
    get_active_rewards,
    redeem_reward as redeem_reward_service,
    allocate_points as allocate_points_service,
    # Exceptions
    RewardNotFoundError,
    InsufficientPointsError,
    InvalidAmountError,
    UserNotFoundError,
)


class TransactionPagination(PageNumberPagination):
    """Pagination for ledger history."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


def _ledger_result_data(result):
    return LedgerResultSerializer({
        'transaction': result.transaction,
        'balance': result.balance,
        'level': result.level,
        'badges': [badge.name for badge in result.badges],
    }).data


@extend_schema(
    responses={200: TransactionSerializer(many=True)},
    description="The caller's points ledger, newest first.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transaction_history(request):
    """List the authenticated user's transactions."""
    paginator = TransactionPagination()
    page = paginator.paginate_queryset(get_user_transactions(user=request.user), request)
    serializer = TransactionSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)


@extend_schema(
    responses={200: BalanceSerializer},
    description="Ledger-derived balance, installation count and level progress.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balance(request):
    """Get the caller's balance computed from the ledger."""
    stats = get_user_stats(user=request.user)
    progress = level_progress(stats.points)

    return Response(BalanceSerializer({
        'points': stats.points,
        'installations': stats.installations,
        'level': progress.level,
        'progress': progress.progress,
        'next_level_points': progress.next_level_points,
    }).data)


@extend_schema(
    responses={200: RewardSerializer(many=True)},
    description="Active reward catalogue.",
    tags=['rewards'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def reward_list(request):
    """List rewards that can be redeemed."""
    serializer = RewardSerializer(get_active_rewards(), many=True)
    return Response(serializer.data)


@extend_schema(
    request=RedeemRewardSerializer,
    responses={201: LedgerResultSerializer},
    description="Redeem a reward, spending points from the ledger.",
    tags=['rewards'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_reward(request):
    """Redeem a reward for the authenticated user."""
    serializer = RedeemRewardSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = redeem_reward_service(
            user=request.user,
            reward_id=serializer.validated_data['reward_id'],
        )
    except RewardNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPointsError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(_ledger_result_data(result), status=status.HTTP_201_CREATED)


@extend_schema(
    request=AllocatePointsSerializer,
    responses={201: LedgerResultSerializer},
    description="Allocate points to an installer for off-scan activity (admins only).",
    tags=['rewards'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsProgramAdmin])
def allocate_points(request):
    """Manually allocate points to a user."""
    serializer = AllocatePointsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        user = User.objects.get(id=data['user_id'])
    except User.DoesNotExist:
        return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

    try:
        result = allocate_points_service(
            user=user,
            amount=data['amount'],
            activity_type=data['activity_type'],
            allocated_by=request.user,
            description=data.get('description', ''),
        )
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidAmountError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(_ledger_result_data(result), status=status.HTTP_201_CREATED)
