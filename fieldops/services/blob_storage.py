"""Yandex Disk storage for incident photos."""
import logging
import re
from typing import Optional

import requests

from fieldops.config import settings

logger = logging.getLogger('blob_storage')


class BlobStorageService:
    """Uploads files under a caller-chosen path and returns a public URL."""

    BASE_URL = 'https://cloud-api.yandex.net/v1/disk'

    def __init__(self, token: Optional[str] = None, base_folder: Optional[str] = None):
        self.token = token if token is not None else settings.YANDEX_DISK_TOKEN
        self.base_folder = base_folder or settings.YANDEX_DISK_BASE_FOLDER

    def _get_headers(self) -> Optional[dict]:
        """Get authorization headers."""
        if not self.token:
            logger.error("Yandex Disk token not configured")
            return None
        return {
            'Authorization': f'OAuth {self.token}',
            'Content-Type': 'application/json'
        }

    @staticmethod
    def sanitize_component(component: str) -> str:
        """Sanitize a path component."""
        safe = re.sub(r'[^\w\-.]', '_', component or '')
        return safe or 'unknown'

    def incident_photo_path(self, incident_id: str, filename: str) -> str:
        """Storage path for an incident photo."""
        return '/'.join([
            '',
            self.sanitize_component(self.base_folder),
            'incidents',
            self.sanitize_component(incident_id),
            self.sanitize_component(filename),
        ])

    def create_folder(self, folder_path: str, headers: dict) -> bool:
        """Create a folder; an existing folder counts as success."""
        response = requests.put(
            f'{self.BASE_URL}/resources',
            headers=headers,
            params={'path': folder_path},
            timeout=10
        )
        if response.status_code in (200, 201, 409):
            return True
        logger.error(f"Failed to create folder {folder_path}: {response.status_code}")
        return False

    def upload(self, file_data: bytes, file_path: str) -> Optional[str]:
        """Upload a file, publish it and return its public URL."""
        headers = self._get_headers()
        if not headers:
            return None

        try:
            # Parent folders must exist before upload
            parts = file_path.strip('/').split('/')[:-1]
            for depth in range(1, len(parts) + 1):
                if not self.create_folder('/' + '/'.join(parts[:depth]), headers):
                    return None

            response = requests.get(
                f'{self.BASE_URL}/resources/upload',
                headers=headers,
                params={'path': file_path, 'overwrite': 'true'},
                timeout=10
            )
            if response.status_code != 200:
                logger.error(f"Failed to get upload URL: {response.status_code}")
                return None

            href = response.json().get('href')
            if not href:
                logger.error("No upload URL in response")
                return None

            upload_response = requests.put(href, data=file_data, timeout=60)
            if upload_response.status_code not in (201, 202):
                logger.error(f"Failed to upload file: {upload_response.status_code}")
                return None

            publish_response = requests.put(
                f'{self.BASE_URL}/resources/publish',
                headers=headers,
                params={'path': file_path},
                timeout=10
            )
            if publish_response.status_code != 200:
                logger.error(f"Failed to publish file: {publish_response.status_code}")
                return None

            info_response = requests.get(
                f'{self.BASE_URL}/resources',
                headers=headers,
                params={'path': file_path, 'fields': 'public_url'},
                timeout=10
            )
            if info_response.status_code == 200:
                public_url = info_response.json().get('public_url')
                if public_url:
                    logger.info(f"Uploaded {file_path}")
                    return public_url.strip()
            logger.error(f"Failed to get public URL: {info_response.status_code}")
        except requests.RequestException as exc:
            logger.error(f"Error uploading file: {exc}")
        return None
