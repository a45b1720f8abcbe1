"""
Appwrite Storage access for uploaded media and downloads.

Design choices:
- Same shape as db.py: a module-level client set by init_appwrite() and
  coroutines that push the blocking SDK calls onto a thread
- Uploads return the public download URL that gets stored in Firestore
"""

import os
import asyncio
import logging
import mimetypes
from typing import Dict, Optional

from appwrite.client import Client
from appwrite.id import ID
from appwrite.input_file import InputFile
from appwrite.services.storage import Storage

APK_MIME_TYPE = "application/vnd.android.package-archive"

storage: Optional[Storage] = None
_endpoint: str = ""
_project_id: str = ""


def init_appwrite(
    endpoint: Optional[str] = None,
    project_id: Optional[str] = None,
    api_key: Optional[str] = None
) -> None:
    """Initialize the Appwrite client and set the global Storage service."""
    global storage, _endpoint, _project_id

    endpoint = endpoint or os.getenv("APPWRITE_ENDPOINT")
    project_id = project_id or os.getenv("APPWRITE_PROJECT_ID")
    api_key = api_key or os.getenv("APPWRITE_API_KEY")

    if not endpoint:
        raise ValueError("APPWRITE_ENDPOINT not provided")
    if not project_id:
        raise ValueError("APPWRITE_PROJECT_ID not provided")

    client = Client()
    client.set_endpoint(endpoint)
    client.set_project(project_id)
    if api_key:
        client.set_key(api_key)
    else:
        logging.warning("APPWRITE_API_KEY not set; storage calls run without a server key")

    storage = Storage(client)
    _endpoint = endpoint.rstrip("/")
    _project_id = project_id


def default_bucket() -> str:
    bucket_id = os.getenv("APPWRITE_STORAGE_BUCKET")
    if not bucket_id:
        raise ValueError("APPWRITE_STORAGE_BUCKET not provided")
    return bucket_id


def guess_content_type(filename: str) -> str:
    if filename.lower().endswith(".apk"):
        return APK_MIME_TYPE
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"


def file_download_url(bucket_id: str, file_id: str) -> str:
    return f"{_endpoint}/storage/buckets/{bucket_id}/files/{file_id}/download?project={_project_id}"


async def upload_file(data: bytes, filename: str, bucket_id: Optional[str] = None) -> str:
    """Upload bytes as a new file and return its download URL."""
    assert storage is not None, "Appwrite storage is not initialized"
    bucket_id = bucket_id or default_bucket()

    input_file = InputFile.from_bytes(data, filename=filename, mime_type=guess_content_type(filename))
    try:
        uploaded = await asyncio.to_thread(storage.create_file, bucket_id, ID.unique(), input_file)
    except Exception as e:
        logging.error(f"Upload of {filename} to bucket {bucket_id} failed: {e}")
        raise

    file_id = uploaded["$id"]
    logging.info(f"Uploaded {filename} ({len(data)} bytes) as {file_id}")
    return file_download_url(bucket_id, file_id)


async def fix_apk_file(bucket_id: str, file_id: str) -> Dict:
    """
    Make an already uploaded APK download as an installable package.

    Appwrite keeps the content type detected at upload time and only lets
    the name and permissions change afterwards, so the stored name is given
    an .apk extension (browsers and Android pick the installer by it).
    """
    assert storage is not None, "Appwrite storage is not initialized"

    try:
        current = await asyncio.to_thread(storage.get_file, bucket_id, file_id)
        name = current.get("name") or file_id
        result = {
            'success': True,
            'file_id': file_id,
            'name': name,
            'mime_type': current.get("mimeType"),
            'changed': False,
            'url': file_download_url(bucket_id, file_id),
        }
        if name.lower().endswith(".apk"):
            return result

        new_name = f"{os.path.splitext(name)[0]}.apk"
        await asyncio.to_thread(storage.update_file, bucket_id, file_id, new_name)
        logging.info(f"Renamed {file_id}: {name} -> {new_name}")
        result.update({'name': new_name, 'changed': True})
        return result
    except Exception as e:
        logging.error(f"APK fix failed for {bucket_id}/{file_id}: {e}")
        raise
