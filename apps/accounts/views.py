from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import UserSerializer, CandidateSearchSerializer, CandidateSerializer
from .services import search_candidates, InvalidSearchError


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    responses={200: UserSerializer},
    description="Get the authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current user profile."""
    serializer = UserSerializer(request.user)
    return Response(serializer.data)


@extend_schema(
    parameters=[
        OpenApiParameter('query', str, description='Search term (username, email or name)'),
        OpenApiParameter('limit', int, description='Page size'),
        OpenApiParameter('offset', int, description='Page start'),
    ],
    responses={
        200: CandidateSerializer(many=True),
        400: ErrorResponseSerializer,
    },
    description="Search buyers who can be asked to act as a receiver. The caller is never listed.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search_users(request):
    """Search receiver candidates."""
    params = CandidateSearchSerializer(data=request.query_params)
    params.is_valid(raise_exception=True)

    try:
        candidates = search_candidates(
            query=params.validated_data['query'],
            exclude_user=request.user,
            limit=params.validated_data['limit'],
            offset=params.validated_data['offset'],
        )
    except InvalidSearchError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    serializer = CandidateSerializer(candidates, many=True)
    return Response({'results': serializer.data, 'count': len(serializer.data)})
