from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/              - List user's groups
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details
    # PATCH  /api/groups/{id}/         - Update group (owner)
    # DELETE /api/groups/{id}/         - Delete group (owner)
    
    # Custom group actions
    # POST   /api/groups/join/                      - Join with invite code
    # GET    /api/groups/preview/?code=             - Look up group by invite code
    # GET    /api/groups/{id}/members/              - List members with balances
    # POST   /api/groups/{id}/leave/                - Leave group
    # POST   /api/groups/{id}/regenerate_invite/    - Regenerate invite code (owner)
    # POST   /api/groups/{id}/log_failure/          - Log a failure and distribute penalties
    # GET    /api/groups/{id}/leaderboard/          - Members ranked by failures
    
    # Additional endpoints
    path('my/', views.my_groups, name='my-groups'),
    
    # Include router URLs
    path('', include(router.urls)),
]
