from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import BuddyRequest
from .serializers import (
    BuddyRequestSerializer,
    SubmitBuddyRequestSerializer,
    BuddyRequestListQuerySerializer,
    BuddyRoleSerializer,
    BuddyErrorSerializer,
)
from .permissions import IsBuyer, IsRequestParty

from apps.buddies.services import (
    submit_request,
    approve_request,
    deny_request,
    request_cancel,
    confirm_cancel,
    decline_cancel,
    cancel_my_request,
    resolve_role,
    requests_for_user,
    receiver_joiners,
    joiner_request,
    # Exceptions
    BuddiesServiceError,
    StaleStateError,
    TransientError,
)


def error_response(exc: BuddiesServiceError) -> Response:
    """Translate a service error into the JSON body clients key their UI on."""
    body = {
        'error': str(exc),
        'code': exc.code,
        'presentation': exc.presentation,
    }
    if isinstance(exc, StaleStateError):
        body['current_status'] = exc.current_status

    response = Response(body, status=exc.http_status)
    if isinstance(exc, TransientError):
        response['Retry-After'] = str(exc.retry_after)
    return response


ERROR_RESPONSES = {
    400: BuddyErrorSerializer,
    403: BuddyErrorSerializer,
    404: BuddyErrorSerializer,
    409: BuddyErrorSerializer,
    503: BuddyErrorSerializer,
}


class BuddyRequestPagination(PageNumberPagination):
    """Custom pagination for buddy requests."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class BuddyRequestViewSet(mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for the receiver/joiner request lifecycle.

    All state changes go through services; the views only parse input and
    translate service errors.

    list: Requests for the caller by role (receiver, joiner, history)
    create: Ask a receiver to consolidate shipments
    retrieve: Get a request (parties only)
    """

    queryset = BuddyRequest.objects.select_related('joiner', 'receiver')
    serializer_class = BuddyRequestSerializer
    permission_classes = [IsAuthenticated, IsBuyer]
    pagination_class = BuddyRequestPagination

    def get_permissions(self):
        """Set permissions based on action."""
        if self.action == 'retrieve':
            return [IsAuthenticated(), IsBuyer(), IsRequestParty()]
        return [IsAuthenticated(), IsBuyer()]

    def _respond(self, operation, **kwargs):
        try:
            buddy_request = operation(**kwargs)
        except BuddiesServiceError as e:
            return error_response(e)
        return Response(BuddyRequestSerializer(buddy_request).data)

    @extend_schema(
        parameters=[
            OpenApiParameter('role', str, enum=['receiver', 'joiner', 'history'],
                             description='receiver: live joiners, joiner: own live request, '
                                         'history: every request the caller is party to'),
        ],
        responses={200: BuddyRequestSerializer(many=True)},
        tags=['buddies'],
    )
    def list(self, request, *args, **kwargs):
        """List requests for the caller by role."""
        params = BuddyRequestListQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        role = params.validated_data['role']

        if role == 'receiver':
            requests = receiver_joiners(request.user)
        elif role == 'joiner':
            own = joiner_request(request.user)
            requests = [own] if own is not None else []
        else:
            requests = requests_for_user(request.user)

        page = self.paginate_queryset(requests)
        serializer = BuddyRequestSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    @extend_schema(
        request=SubmitBuddyRequestSerializer,
        responses={201: BuddyRequestSerializer, 422: BuddyErrorSerializer, **ERROR_RESPONSES},
        tags=['buddies'],
    )
    def create(self, request, *args, **kwargs):
        """Submit a request to a receiver."""
        serializer = SubmitBuddyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            buddy_request = submit_request(
                joiner=request.user,
                receiver_username=serializer.validated_data['receiver_username'],
                receiver_id=serializer.validated_data.get('receiver_id'),
            )
        except BuddiesServiceError as e:
            return error_response(e)

        output_serializer = BuddyRequestSerializer(buddy_request)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: BuddyRequestSerializer, **ERROR_RESPONSES}, tags=['buddies'])
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """Approve a pending request (receiver only)."""
        return self._respond(approve_request, request_id=pk, acting_receiver=request.user)

    @extend_schema(request=None, responses={200: BuddyRequestSerializer, **ERROR_RESPONSES}, tags=['buddies'])
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        """Reject a pending request, or decline a pending cancel (receiver only)."""
        return self._respond(deny_request, request_id=pk, acting_receiver=request.user)

    @extend_schema(request=None, responses={200: BuddyRequestSerializer, **ERROR_RESPONSES}, tags=['buddies'])
    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        """Ask the receiver to cancel an approved request (joiner only)."""
        return self._respond(request_cancel, request_id=pk, acting_joiner=request.user)

    @extend_schema(request=None, responses={200: BuddyRequestSerializer, **ERROR_RESPONSES}, tags=['buddies'])
    @action(detail=True, methods=['post'], url_path='cancel/confirm', url_name='cancel-confirm')
    def cancel_confirm(self, request, pk=None):
        """Confirm the joiner's cancel (receiver only)."""
        return self._respond(confirm_cancel, request_id=pk, acting_receiver=request.user)

    @extend_schema(request=None, responses={200: BuddyRequestSerializer, **ERROR_RESPONSES}, tags=['buddies'])
    @action(detail=True, methods=['post'], url_path='cancel/decline', url_name='cancel-decline')
    def cancel_decline(self, request, pk=None):
        """Keep the relationship and decline the joiner's cancel (receiver only)."""
        return self._respond(decline_cancel, request_id=pk, acting_receiver=request.user)

    @extend_schema(request=None, responses={200: BuddyRequestSerializer, **ERROR_RESPONSES}, tags=['buddies'])
    @action(detail=False, methods=['post'], url_path='cancel-mine', url_name='cancel-mine')
    def cancel_mine(self, request):
        """Withdraw or ask to cancel the caller's live request."""
        return self._respond(cancel_my_request, acting_joiner=request.user)


@extend_schema(
    responses={200: BuddyRoleSerializer, 503: BuddyErrorSerializer},
    description="Whether the caller currently receives for others or joins someone.",
    tags=['buddies'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsBuyer])
def buddy_role(request):
    """Get the caller's receiver/joiner role."""
    try:
        role = resolve_role(user=request.user)
    except BuddiesServiceError as e:
        return error_response(e)

    serializer = BuddyRoleSerializer(role)
    return Response(serializer.data)
