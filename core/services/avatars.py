"""Avatar image helpers: uploads, S3 presigned posts and remote-image mirroring."""

import logging
import mimetypes
import os
from pathlib import Path
from typing import Optional
from uuid import uuid4

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage

logger = logging.getLogger(__name__)

SAFE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
CONTENT_TYPE_MAP = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class AvatarStorageNotConfigured(Exception):
    """Raised when a presigned upload is requested without S3 settings/credentials."""


def _prefix() -> str:
    return getattr(settings, "AVATAR_UPLOAD_PREFIX", "companion_avatars/")


def _guess_ext(name: str, content_type: Optional[str] = None) -> str:
    if content_type:
        ext = CONTENT_TYPE_MAP.get(content_type.split(";")[0].strip().lower())
        if ext:
            return ext
    ext = Path((name or "").split("?")[0]).suffix.lower()
    if ext in SAFE_EXTS:
        return ext
    if content_type:
        ext = mimetypes.guess_extension(content_type.split(";")[0].strip().lower()) or ".jpg"
        if ext == ".jpe":
            ext = ".jpg"
        return ext if ext in SAFE_EXTS else ".jpg"
    return ".jpg"


def new_avatar_key(filename: str, content_type: Optional[str] = None) -> str:
    return f"{_prefix()}{uuid4().hex}{_guess_ext(filename, content_type)}"


def store_uploaded_avatar(uploaded, storage=None) -> str:
    """Save an uploaded image file (local in dev, S3 in prod) and return its URL."""
    storage = storage or default_storage
    key = new_avatar_key(uploaded.name, getattr(uploaded, "content_type", None))
    saved_name = storage.save(key, uploaded)
    logger.info("Stored avatar upload as %s.", saved_name)
    return storage.url(saved_name)


def _is_ours(url: str) -> bool:
    media = getattr(settings, "MEDIA_URL", "") or ""
    return bool(media) and url.startswith(media)


def discard_stored_avatar(url: str, storage=None) -> None:
    """Delete an avatar we stored (by its URL); external URLs are ignored."""
    if not url or not _is_ours(url):
        return
    storage = storage or default_storage
    name = url[len(settings.MEDIA_URL):]
    try:
        storage.delete(name)
        logger.info("Discarded orphaned avatar %s.", name)
    except (OSError, BotoCoreError, ClientError) as exc:
        logger.warning("Could not discard avatar %s: %s", name, exc)


def maybe_cache_remote_avatar(src: str, storage=None) -> str:
    """
    Mirror an external http(s) avatar into our storage when CACHE_REMOTE_AVATARS
    is on. Returns the stored URL, or `src` unchanged when disabled, already
    ours, or the download or the storage write fails.
    """
    src = (src or "").strip()
    if not getattr(settings, "CACHE_REMOTE_AVATARS", False):
        return src
    if not src.startswith(("http://", "https://")) or _is_ours(src):
        return src

    storage = storage or default_storage
    try:
        resp = requests.get(src, timeout=10)
        resp.raise_for_status()
        content_type = resp.headers.get("Content-Type", "")
        if content_type and not content_type.startswith("image/"):
            logger.warning("Remote avatar %s is not an image (%s); keeping URL.", src, content_type)
            return src
        name = new_avatar_key(src, content_type)
        saved_name = storage.save(name, ContentFile(resp.content))
        return storage.url(saved_name)
    except (requests.RequestException, OSError, BotoCoreError, ClientError) as exc:
        logger.warning("Avatar cache failed for %s: %s", src, exc)
        return src


def presign_avatar_upload(filename: str, content_type: str) -> dict:
    """
    Build a presigned POST so the browser can upload an avatar straight to S3.

    Returns {"url", "fields", "key", "public_url"}. Raises
    AvatarStorageNotConfigured when bucket/region or credentials are missing.
    """
    bucket = getattr(settings, "AWS_STORAGE_BUCKET_NAME", None) or os.getenv("AWS_STORAGE_BUCKET_NAME")
    region = getattr(settings, "AWS_S3_REGION_NAME", None) or os.getenv("AWS_S3_REGION_NAME")
    if not bucket or not region:
        raise AvatarStorageNotConfigured("S3 not configured (missing bucket/region).")

    # Explicit keys first (handy for local .env); otherwise boto3's default
    # provider chain (AWS CLI profile, instance role, ...).
    ak = os.getenv("AWS_ACCESS_KEY_ID") or getattr(settings, "AWS_ACCESS_KEY_ID", None)
    sk = os.getenv("AWS_SECRET_ACCESS_KEY") or getattr(settings, "AWS_SECRET_ACCESS_KEY", None)
    if ak and sk:
        session = boto3.Session(aws_access_key_id=ak, aws_secret_access_key=sk, region_name=region)
    else:
        session = boto3.Session(region_name=region)

    if session.get_credentials() is None:
        raise AvatarStorageNotConfigured(
            "AWS credentials not found on server. "
            "Set AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY (or configure an AWS profile/role)."
        )

    key = new_avatar_key(filename, content_type)
    max_bytes = getattr(settings, "AVATAR_MAX_UPLOAD_BYTES", 10 * 1024 * 1024)
    s3 = session.client("s3")
    resp = s3.generate_presigned_post(
        Bucket=bucket,
        Key=key,
        Fields={"Content-Type": content_type},
        Conditions=[
            {"Content-Type": content_type},
            ["content-length-range", 0, max_bytes],
        ],
        ExpiresIn=300,
    )

    domain = getattr(settings, "AWS_S3_CUSTOM_DOMAIN", None)
    base = f"https://{domain}/" if domain else f"https://{bucket}.s3.{region}.amazonaws.com/"
    return {"url": resp["url"], "fields": resp["fields"], "key": key, "public_url": base + key}
