"""
JSON API consumed by the companion form.

    POST  /api/companion          create a companion owned by the caller
    PATCH /api/companion/<id>     replace the caller's companion fields
    POST  /api/uploads/presign    presigned S3 POST for an avatar image

All endpoints require a signed-in session (DRF SessionAuthentication).
"""

import logging

from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView, exception_handler

from .serializers import CompanionSerializer
from .services import companions
from .services.avatars import AvatarStorageNotConfigured, presign_avatar_upload

logger = logging.getLogger(__name__)


def companion_exception_handler(exc, context):
    """
    DRF's default handler, plus: database failures are logged and reported as
    a generic 500 instead of a traceback page.
    """
    response = exception_handler(exc, context)
    if response is None and isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception("[%s] database error", view.__class__.__name__ if view else "api")
        return Response({"detail": "Internal error"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return response


class CompanionCreateView(APIView):
    def post(self, request):
        serializer = CompanionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        companion = companions.create_companion(request.user, **serializer.to_companion_fields())
        return Response(CompanionSerializer(companion).data, status=status.HTTP_201_CREATED)


class CompanionDetailView(APIView):
    def get_object(self, request, companion_id):
        companion = companions.get_companion_for_user(request.user, companion_id)
        if companion is None:
            raise Http404("Companion not found.")
        return companion

    def patch(self, request, companion_id):
        companion = self.get_object(request, companion_id)
        # The form always sends every field, so PATCH validates the full body.
        serializer = CompanionSerializer(companion, data=request.data)
        serializer.is_valid(raise_exception=True)
        companion = companions.update_companion(companion, **serializer.to_companion_fields())
        return Response(CompanionSerializer(companion).data)


class AvatarPresignView(APIView):
    """
    Return a JSON payload for browser direct-to-S3 POST uploads:

      { "url": "<https://bucket.s3.region.amazonaws.com/>",
        "fields": { ...policy / signature fields... },
        "key": "companion_avatars/<guid>.ext",
        "public_url": "<where the image will be served from>" }

    Sends a JSON error if S3 configuration/credentials are missing.
    """

    def post(self, request):
        filename = str(request.data.get("filename") or "upload.jpg").strip()
        content_type = str(request.data.get("content_type") or "image/jpeg").strip()
        if not content_type.startswith("image/"):
            raise ValidationError({"content_type": ["Only image uploads are allowed."]})

        try:
            payload = presign_avatar_upload(filename, content_type)
        except AvatarStorageNotConfigured as exc:
            logger.warning("Avatar presign unavailable: %s", exc)
            return Response({"error": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(payload)
