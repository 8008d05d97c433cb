from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'notes'

router = SimpleRouter()
router.register(r'', views.NoteViewSet, basename='note')

urlpatterns = [
    # Note routes
    # GET    /api/notes/                  - List visible notes
    # POST   /api/notes/                  - Create note
    # GET    /api/notes/{id}/             - Get note
    # PATCH  /api/notes/{id}/             - Partial update
    # DELETE /api/notes/{id}/             - Delete note
    # POST   /api/notes/{id}/like/        - Toggle like
    # POST   /api/notes/{id}/bookmark/    - Toggle bookmark

    # Rating schemas
    path('schemas/active/', views.active_schemas, name='active-schemas'),
    path('schemas/<int:schema_id>/axes/', views.schema_axes, name='schema-axes'),

    # Tags
    path('tags/popular/', views.popular_tags, name='popular-tags'),

    path('', include(router.urls)),
]
