from rest_framework import permissions


class IsBuyer(permissions.BasePermission):
    """
    Permission: Only buyers take part in shipment consolidation.
    """

    message = 'Only buyers can ship with a receiver.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_buyer)


class IsRequestParty(permissions.BasePermission):
    """
    Permission: User must be the joiner or the receiver of the request.
    """

    def has_object_permission(self, request, view, obj):
        # obj is a BuddyRequest instance
        return request.user.id in (obj.joiner_id, obj.receiver_id)
