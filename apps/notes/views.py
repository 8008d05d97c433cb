from rest_framework import status, viewsets, serializers as drf_serializers
from rest_framework.decorators import api_view, action, permission_classes
from rest_framework.exceptions import NotAuthenticated
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAuthenticatedOrReadOnly
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from .serializers import (
    NoteSerializer,
    NoteCreateSerializer,
    NoteWriteSerializer,
    NoteListQuerySerializer,
    LikeToggleSerializer,
    BookmarkToggleSerializer,
    RatingSchemaSerializer,
    RatingAxisSerializer,
    TagSerializer,
)
from .services import (
    create_note,
    get_note,
    list_notes,
    update_note,
    delete_note,
    toggle_like,
    toggle_bookmark,
    get_active_schemas,
    get_schema_axes,
    get_popular_tags,
)
from .services.exceptions import (
    NotesServiceError,
    NOT_FOUND_ERRORS,
    FORBIDDEN_ERRORS,
    BAD_REQUEST_ERRORS,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


def _viewer(request):
    """Authenticated user or None for anonymous requests."""
    return request.user if request.user.is_authenticated else None


def service_error_response(error: NotesServiceError) -> Response:
    """Translate a notes service exception into an error response."""
    if isinstance(error, NOT_FOUND_ERRORS):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, FORBIDDEN_ERRORS):
        status_code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, BAD_REQUEST_ERRORS):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        raise error
    return Response({'error': str(error)}, status=status_code)


class NoteViewSet(viewsets.ViewSet):
    """
    ViewSet for tasting notes.

    list: Notes visible to the caller (public ones plus the caller's own)
    create: Create a note (authenticated)
    retrieve: Get a note (private notes for the author only)
    partial_update: Update a note (author only)
    destroy: Delete a note (author only)
    like: Toggle a like on a note
    bookmark: Toggle a bookmark on a note
    """

    permission_classes = [IsAuthenticatedOrReadOnly]
    lookup_value_regex = r'[0-9a-fA-F-]{36}'

    @extend_schema(
        parameters=[
            OpenApiParameter('userId', OpenApiTypes.UUID, description='Only notes by this user'),
            OpenApiParameter('public', OpenApiTypes.BOOL, description='Only public (true) or private (false) notes'),
            OpenApiParameter('teaId', OpenApiTypes.UUID, description='Only notes about this tea'),
            OpenApiParameter('bookmarked', OpenApiTypes.BOOL, description="Only the caller's bookmarks", default=False),
        ],
        responses={200: NoteSerializer(many=True), 400: ErrorResponseSerializer},
        tags=['notes'],
    )
    def list(self, request):
        query = NoteListQuerySerializer(data=request.query_params.dict())
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        viewer = _viewer(request)
        if filters.get('bookmarked') and viewer is None:
            raise NotAuthenticated()

        try:
            notes = list_notes(viewer=viewer, **filters)
        except NotesServiceError as e:
            return service_error_response(e)

        serializer = NoteSerializer(notes, many=True)
        return Response(serializer.data)

    @extend_schema(
        request=NoteCreateSerializer,
        responses={201: NoteSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['notes'],
    )
    def create(self, request):
        serializer = NoteCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            note = create_note(author=request.user, **serializer.validated_data)
        except NotesServiceError as e:
            return service_error_response(e)

        return Response(NoteSerializer(note).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        responses={200: NoteSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['notes'],
    )
    def retrieve(self, request, pk=None):
        try:
            note = get_note(note_id=pk, viewer=_viewer(request))
        except NotesServiceError as e:
            return service_error_response(e)

        return Response(NoteSerializer(note).data)

    @extend_schema(
        request=NoteWriteSerializer,
        responses={
            200: NoteSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=['notes'],
    )
    def partial_update(self, request, pk=None):
        serializer = NoteWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            note = update_note(note_id=pk, user=request.user, **serializer.validated_data)
        except NotesServiceError as e:
            return service_error_response(e)

        return Response(NoteSerializer(note).data)

    @extend_schema(
        responses={204: None, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['notes'],
    )
    def destroy(self, request, pk=None):
        try:
            delete_note(note_id=pk, user=request.user)
        except NotesServiceError as e:
            return service_error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        request=None,
        responses={201: LikeToggleSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Toggle the caller's like. Returns the new state and like count.",
        tags=['notes'],
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def like(self, request, pk=None):
        try:
            result = toggle_like(note_id=pk, user=request.user)
        except NotesServiceError as e:
            return service_error_response(e)

        return Response(LikeToggleSerializer(result).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=None,
        responses={201: BookmarkToggleSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        description="Toggle the caller's bookmark. Returns the new state.",
        tags=['notes'],
    )
    @action(detail=True, methods=['post'], permission_classes=[IsAuthenticated])
    def bookmark(self, request, pk=None):
        try:
            result = toggle_bookmark(note_id=pk, user=request.user)
        except NotesServiceError as e:
            return service_error_response(e)

        return Response(BookmarkToggleSerializer(result).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: RatingSchemaSerializer(many=True)},
    description="Active rating schemas with their axes.",
    tags=['schemas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def active_schemas(request):
    """List active rating schemas using service layer."""
    serializer = RatingSchemaSerializer(get_active_schemas(), many=True)
    return Response(serializer.data)


@extend_schema(
    responses={200: RatingAxisSerializer(many=True), 404: ErrorResponseSerializer},
    description="Axes of a rating schema in display order.",
    tags=['schemas'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def schema_axes(request, schema_id):
    """List a schema's axes using service layer."""
    try:
        axes = get_schema_axes(schema_id=schema_id)
    except NotesServiceError as e:
        return service_error_response(e)

    serializer = RatingAxisSerializer(axes, many=True)
    return Response(serializer.data)


@extend_schema(
    parameters=[
        OpenApiParameter('limit', OpenApiTypes.INT, description='Maximum number of tags', default=20),
    ],
    responses={200: TagSerializer(many=True)},
    description="Tags most used on public notes.",
    tags=['notes'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def popular_tags(request):
    """Get popular tags using service layer."""
    try:
        limit = int(request.query_params.get('limit', 20))
    except ValueError:
        return Response(
            {'error': 'limit must be an integer'},
            status=status.HTTP_400_BAD_REQUEST
        )

    limit = max(1, min(limit, 100))
    serializer = TagSerializer(get_popular_tags(limit=limit), many=True)
    return Response(serializer.data)
