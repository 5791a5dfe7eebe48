"""
Image upload to the Cloudinary asset host over its signed REST endpoint.
"""
from __future__ import annotations

import hashlib
import logging
import time
from typing import Any, Dict, Optional

import requests

from eventhub.config import settings
from eventhub.errors import UpstreamServiceError
from eventhub.utils.http_client import HttpClient

logger = logging.getLogger(__name__)

UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud}/image/upload"


def sign_params(params: Dict[str, Any], api_secret: str) -> str:
    """Cloudinary signature: sha1 of sorted k=v pairs joined by & plus the secret."""
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in (None, ""))
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class CloudinaryUploader:
    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        *,
        folder: str = "DevEvents",
        http: Optional[HttpClient] = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self._http = http or HttpClient(
            timeout=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
        )

    @classmethod
    def from_settings(cls) -> "CloudinaryUploader":
        return cls(
            settings.cloudinary_cloud_name,
            settings.cloudinary_api_key,
            settings.cloudinary_api_secret,
            folder=settings.upload_folder,
        )

    def upload(self, content: bytes, filename: str = "image") -> str:
        """Upload image bytes and return the asset's secure_url."""
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise UpstreamServiceError("Asset host credentials are not configured")

        params = {"folder": self.folder, "timestamp": int(time.time())}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        url = UPLOAD_URL.format(cloud=self.cloud_name)

        try:
            resp = self._http.post(url, data=data, files={"file": (filename, content)})
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Image upload failed: %s", exc)
            raise UpstreamServiceError(f"Upload failed: {exc}") from exc

        secure_url = payload.get("secure_url") if isinstance(payload, dict) else None
        if not secure_url:
            raise UpstreamServiceError("Upload failed: no secure_url returned")
        return secure_url


def get_uploader() -> CloudinaryUploader:
    return CloudinaryUploader.from_settings()
