from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'buddies'

# Router for ViewSets
router = DefaultRouter()
router.register(r'requests', views.BuddyRequestViewSet, basename='buddy-request')

urlpatterns = [
    # BuddyRequest ViewSet routes
    # GET    /api/buddies/requests/?role=receiver|joiner|history  - List by role
    # POST   /api/buddies/requests/                               - Submit to a receiver
    # GET    /api/buddies/requests/{id}/                          - Get request (parties)

    # Lifecycle actions
    # POST   /api/buddies/requests/{id}/approve/          - Approve (receiver)
    # POST   /api/buddies/requests/{id}/reject/           - Reject or decline cancel (receiver)
    # POST   /api/buddies/requests/{id}/cancel/           - Ask to cancel (joiner)
    # POST   /api/buddies/requests/{id}/cancel/confirm/   - Confirm cancel (receiver)
    # POST   /api/buddies/requests/{id}/cancel/decline/   - Decline cancel (receiver)
    # POST   /api/buddies/requests/cancel-mine/           - Withdraw/cancel own request (joiner)

    # Additional endpoints
    path('role/', views.buddy_role, name='buddy-role'),

    # Include router URLs
    path('', include(router.urls)),
]
