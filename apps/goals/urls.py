from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'goals'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GoalViewSet, basename='goal')

urlpatterns = [
    # Goal ViewSet routes
    # GET    /api/goals/?group=              - List a group's goals with completions
    # POST   /api/goals/                     - Create goal
    # GET    /api/goals/{id}/                - Get goal
    # PATCH  /api/goals/{id}/                - Update goal (creator)
    # DELETE /api/goals/{id}/                - Delete goal (creator)

    # Custom goal actions
    # POST   /api/goals/{id}/deactivate/     - Deactivate goal (creator)
    # POST   /api/goals/{id}/complete/       - Log a completion
    # GET    /api/goals/{id}/completions/    - List completions
    # GET    /api/goals/{id}/status/?now=    - Current user's status
    # GET    /api/goals/statuses/?group=     - Statuses of all active goals
    # GET    /api/goals/by_date/?group=&date= - Completions on a day

    path('completions/<int:completion_id>/', views.delete_completion, name='delete-completion'),

    # Include router URLs
    path('', include(router.urls)),
]
