# src/storage/services.py
import hashlib
import hmac
import logging
import time
import urllib.parse
import requests
from datetime import datetime
from fastapi import HTTPException
from config import settings

logger = logging.getLogger(__name__)


class BlobStore:
    """Uploads attachments and avatars to GCore object storage."""

    @staticmethod
    def image_key(user_id: str, millis: int) -> str:
        return f"images/{user_id}/{millis}"

    @staticmethod
    def file_key(user_id: str, millis: int, name: str) -> str:
        return f"files/{user_id}/{millis}-{urllib.parse.quote(name)}"

    @staticmethod
    async def upload_image(data: bytes, user_id: str, mime_type: str = "image/jpeg") -> str:
        """Upload an image under the owner's namespace and return its URL."""
        key = BlobStore.image_key(user_id, int(time.time() * 1000))
        return await BlobStore._upload(data, key, mime_type)

    @staticmethod
    async def upload_file(data: bytes, name: str, user_id: str,
                          mime_type: str = "application/octet-stream") -> str:
        """Upload an arbitrary file and return its URL."""
        key = BlobStore.file_key(user_id, int(time.time() * 1000), name)
        return await BlobStore._upload(data, key, mime_type)

    @staticmethod
    async def _upload(data: bytes, file_key: str, mime_type: str) -> str:
        """PUT the bytes in one request; any non-200 answer is a failed upload."""
        host = f"{settings.GCORE_BUCKET_NAME}.{settings.GCORE_S3_DOMAIN}"
        canonical_uri = f"/{file_key}"
        now = datetime.utcnow()
        payload_hash = hashlib.sha256(data).hexdigest()
        headers = BlobStore._create_auth_headers(
            "PUT", host, canonical_uri, payload_hash, mime_type,
            now.strftime('%Y%m%dT%H%M%SZ'), now.strftime('%Y%m%d'), len(data)
        )
        response = requests.put(f"https://{host}{canonical_uri}", data=data, headers=headers, timeout=60)
        if response.status_code != 200:
            logger.error(f"GCore upload failed: {response.status_code} - {response.text}")
            raise HTTPException(status_code=502, detail=f"Upload failed: {response.status_code}")
        return f"{settings.CDN_URL}/{file_key}"

    @staticmethod
    def _create_auth_headers(method: str, host: str, canonical_uri: str, payload_hash: str,
                             content_type: str, amz_date: str, date_stamp: str, size: int) -> dict:
        """AWS Signature V4 headers for the bucket."""
        def sign(key, msg):
            return hmac.new(key, msg.encode('utf-8'), hashlib.sha256).digest()

        region = settings.GCORE_REGION_NAME
        service = 's3'
        k_date = sign(('AWS4' + settings.GCORE_SECRET_KEY).encode('utf-8'), date_stamp)
        k_signing = sign(sign(sign(k_date, region), service), 'aws4_request')

        canonical_headers = f"host:{host}\nx-amz-content-sha256:{payload_hash}\nx-amz-date:{amz_date}\n"
        signed_headers = 'host;x-amz-content-sha256;x-amz-date'
        canonical_request = f'{method}\n{canonical_uri}\n\n{canonical_headers}\n{signed_headers}\n{payload_hash}'
        credential_scope = f'{date_stamp}/{region}/{service}/aws4_request'
        string_to_sign = (f'AWS4-HMAC-SHA256\n{amz_date}\n{credential_scope}\n'
                          f'{hashlib.sha256(canonical_request.encode("utf-8")).hexdigest()}')
        signature = hmac.new(k_signing, string_to_sign.encode('utf-8'), hashlib.sha256).hexdigest()
        return {
            'Authorization': (f'AWS4-HMAC-SHA256 Credential={settings.GCORE_ACCESS_KEY}/{credential_scope}, '
                              f'SignedHeaders={signed_headers}, Signature={signature}'),
            'x-amz-content-sha256': payload_hash,
            'x-amz-date': amz_date,
            'Content-Type': content_type,
            'Content-Length': str(size),
        }
