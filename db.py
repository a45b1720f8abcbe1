"""
Data Access Layer (DAL) for Firestore - tool listings and YouTube videos

Design choices:
- Uses asyncio.to_thread for non-blocking Firebase operations
- Caches tool documents for 5 minutes; writes invalidate the cached entry
"""

from typing import Dict, List, Optional
import os
import json
import asyncio
import logging
from cachetools import TTLCache

import firebase_admin
from firebase_admin import credentials, firestore

from markup import render_description
from youtube import background_numbers, is_valid_youtube_url

# Global Firestore client
db: Optional[firestore.Client] = None

TOOLS_COLLECTION = 'Windows-tools'
YOUTUBE_COLLECTION = 'youtube-videos'

# Cache tool documents for 5 minutes (300 seconds)
_tool_cache = TTLCache(maxsize=100, ttl=300)


def init_firebase(
    service_account_key_path: Optional[str] = None,
    service_account_json: Optional[str] = None
) -> None:
    """Initialize firebase-admin and set global Firestore client."""
    global db
    if firebase_admin._apps:
        db = firestore.client()
        return

    if not service_account_key_path and not service_account_json:
        service_account_key_path = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY_PATH")
        service_account_json = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")

    if service_account_json:
        try:
            cred_dict = json.loads(service_account_json)
        except json.JSONDecodeError as exc:
            raise ValueError("Invalid FIREBASE_SERVICE_ACCOUNT_JSON") from exc
        cred = credentials.Certificate(cred_dict)
    else:
        if not service_account_key_path:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY_PATH not provided")
        cred = credentials.Certificate(service_account_key_path)

    firebase_admin.initialize_app(cred)
    db = firestore.client()


def _normalize_tool(doc_id: str, data: Dict) -> Dict:
    return {
        'id': doc_id,
        'title': data.get('title') or '',
        'description': data.get('description') or '',
        'image': data.get('image') or '',
        'downloadUrl': data.get('downloadUrl'),
        'downloads': data.get('downloads') or 0,
        'priceType': data.get('priceType') or 'Free',
        'price': data.get('price'),
        'os': data.get('os') or '',
        'architecture': data.get('architecture') or '',
        'date': data.get('date') or '',
        'rating': data.get('rating') or '',
        'security': data.get('security') or '',
        'screenshots': data.get('screenshots') or [],
        'size': data.get('size') or '',
        'downloadType': data.get('downloadType') or 'file',
    }


async def get_tool(doc_id: str) -> Dict:
    """Get a tool listing by doc_id, from the cache when possible."""
    if doc_id in _tool_cache:
        logging.info(f"Cache HIT for tool: {doc_id}")
        return _tool_cache[doc_id]

    logging.info(f"Cache MISS for tool: {doc_id}. Fetching from Firestore.")
    assert db is not None, "Firestore client is not initialized"

    doc_ref = db.collection(TOOLS_COLLECTION).document(doc_id)
    doc = await asyncio.to_thread(doc_ref.get)

    if not doc.exists:
        return {}

    result = _normalize_tool(doc.id, doc.to_dict() or {})
    _tool_cache[doc_id] = result
    return result


async def _update_tool(doc_id: str, payload: Dict) -> None:
    assert db is not None, "Firestore client is not initialized"

    payload['updatedAt'] = firestore.SERVER_TIMESTAMP
    try:
        doc_ref = db.collection(TOOLS_COLLECTION).document(doc_id)
        await asyncio.to_thread(doc_ref.update, payload)
        logging.info(f"Updated tool {doc_id}: {sorted(payload)}")
    except Exception as e:
        logging.error(f"Failed to update tool {doc_id}: {e}")
        raise
    finally:
        _tool_cache.pop(doc_id, None)


async def publish_description(doc_id: str, markup_text: str) -> str:
    """
    Render description markup and store the HTML on the tool.
    Raises MarkupError before touching Firestore if the markup is malformed.
    """
    html = render_description(markup_text)
    await _update_tool(doc_id, {'description': html})
    return html


async def update_tool_media(
    doc_id: str,
    image: Optional[str] = None,
    screenshots: Optional[List[str]] = None,
    download_url: Optional[str] = None,
    size: Optional[str] = None
) -> None:
    """Attach uploaded media URLs to a tool. Screenshots are appended."""
    payload: Dict = {}
    if image:
        payload['image'] = image
    if screenshots:
        payload['screenshots'] = firestore.ArrayUnion(screenshots)
    if download_url:
        payload['downloadUrl'] = download_url
    if size:
        payload['size'] = size

    if not payload:
        raise ValueError("Nothing to update")
    await _update_tool(doc_id, payload)


async def add_youtube_video(title: str, link: str) -> str:
    """Store a YouTube reference and return the new document id."""
    assert db is not None, "Firestore client is not initialized"

    title = (title or '').strip()
    link = (link or '').strip()
    if not title or not link:
        raise ValueError("Please fill all required fields: Title and YouTube Link.")
    if not is_valid_youtube_url(link):
        raise ValueError("Please enter a valid YouTube URL.")

    collection = db.collection(YOUTUBE_COLLECTION)
    try:
        existing = await asyncio.to_thread(collection.get)
        video_count = len(existing)
        _, doc_ref = await asyncio.to_thread(
            collection.add,
            {
                'id': str(video_count + 1),
                'title': title,
                'link': link,
                'backgroundNumbers': background_numbers(video_count),
                'createdAt': firestore.SERVER_TIMESTAMP,
            }
        )
    except Exception as e:
        logging.error(f"Failed to add YouTube video '{title}': {e}")
        raise

    logging.info(f"Added YouTube video {doc_ref.id}: {title}")
    return doc_ref.id
