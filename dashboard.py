"""
Admin Dashboard (Streamlit) for the download site's content tools

- Description markup: toolbar, tag validation, live preview, publish to Firestore.
- Images & downloads: cover crop (500x500), screenshot resize (800px),
  download-file checks, upload to Appwrite Storage and attach to a tool.
- YouTube: link validation, embed preview, add to the 'youtube-videos' collection.
- APK: upload APKs with the package MIME type, or rename an uploaded APK so it
  downloads as an installable package.

Usage:
  1. Create a .env with FIREBASE_SERVICE_ACCOUNT_KEY_PATH (or
     FIREBASE_SERVICE_ACCOUNT_JSON), APPWRITE_ENDPOINT, APPWRITE_PROJECT_ID,
     APPWRITE_API_KEY and APPWRITE_STORAGE_BUCKET.
  2. Run: streamlit run dashboard.py
"""

import os
import asyncio
import logging
from typing import List, Optional, Tuple

import streamlit as st
from dotenv import load_dotenv

import db as db_module
import storage as storage_module
from editor import COLORS, DEFAULT_TEXT_COLOR, FONT_SIZES, image_html, styled_text_html, video_html
from forms import format_size_mb, validate_download_file
from imaging import ImageProcessingError, ProcessedImage, crop_and_resize, resize_image
from markup import FORMATS, MarkupError, apply_format, check_description, convert_to_html, sanitize_html
from strings import Strings as S
from youtube import embed_url, is_valid_youtube_url

# Load environment
load_dotenv()

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)

FIREBASE_KEY_PATH = os.getenv("FIREBASE_SERVICE_ACCOUNT_KEY_PATH")
FIREBASE_KEY_JSON = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON")
STORAGE_BUCKET = os.getenv("APPWRITE_STORAGE_BUCKET")

IMAGE_TYPES = ['png', 'jpg', 'jpeg', 'gif', 'webp']

TOOLBAR_LABELS = {
    "bold": "Bold",
    "underline": "Underline",
    "center": "Center",
    "size=sm": "Small",
    "size=md": "Medium",
    "size=lg": "Large",
    "color=red": "Red",
    "color=green": "Green",
    "color=blue": "Blue",
    "link": "Link",
    "bar": "Divider",
    "paragraph": "Paragraph",
}


@st.cache_resource
def init_backends() -> None:
    """Initialize Firestore and Appwrite once per server process."""
    db_module.init_firebase(FIREBASE_KEY_PATH, FIREBASE_KEY_JSON)
    storage_module.init_appwrite()


st.set_page_config(page_title=S.APP_TITLE, layout="centered")

try:
    init_backends()
except Exception as e:
    st.error(S.CONFIG_ERROR.format(error=e))
    st.stop()

# Initialize session state
if 'description_markup' not in st.session_state:
    st.session_state.description_markup = ""
if 'format_target' not in st.session_state:
    st.session_state.format_target = ""
if 'link_url' not in st.session_state:
    st.session_state.link_url = ""
if 'toolbar_error' not in st.session_state:
    st.session_state.toolbar_error = None


# ----------------- Description markup -----------------

def locate_selection(text: str, fragment: str) -> Tuple[int, int]:
    """Selection for the first occurrence of fragment, or the end of the text."""
    if fragment:
        start = text.find(fragment)
        if start >= 0:
            return start, start + len(fragment)
    return len(text), len(text)


def on_toolbar_click(fmt: str) -> None:
    text = st.session_state.description_markup
    start, end = locate_selection(text, st.session_state.format_target)
    try:
        result = apply_format(text, start, end, fmt, st.session_state.link_url or None)
    except MarkupError as e:
        st.session_state.toolbar_error = str(e)
        return
    st.session_state.description_markup = result.text
    st.session_state.toolbar_error = None
    if fmt == "link":
        st.session_state.link_url = ""


def on_load_tool(doc_id: str) -> None:
    try:
        tool = asyncio.run(db_module.get_tool(doc_id))
    except Exception as e:
        st.session_state.toolbar_error = S.OPERATION_FAILED.format(error=e)
        logging.exception("Load tool failed")
        return
    if not tool:
        st.session_state.toolbar_error = S.TOOL_NOT_FOUND.format(doc_id=doc_id)
        return
    st.session_state.description_markup = tool['description']
    st.session_state.toolbar_error = None


def description_page():
    st.title(S.PAGE_DESCRIPTION)
    st.caption(S.DESCRIPTION_HELP)

    st.text_input(S.FORMAT_TARGET_LABEL, key="format_target")
    st.text_input(S.LINK_URL_LABEL, key="link_url")

    cols = st.columns(6)
    for i, fmt in enumerate(FORMATS):
        cols[i % 6].button(
            TOOLBAR_LABELS[fmt],
            key=f"fmt_{fmt}",
            on_click=on_toolbar_click,
            args=(fmt,),
            use_container_width=True,
        )

    if st.session_state.toolbar_error:
        st.error(st.session_state.toolbar_error)

    markup_text = st.text_area(S.DESCRIPTION_LABEL, key="description_markup", height=300)

    try:
        check_description(markup_text)
        st.success(S.MARKUP_VALID)
        valid = True
    except MarkupError as e:
        st.error(S.MARKUP_INVALID.format(error=e))
        valid = False

    st.subheader(S.PREVIEW)
    st.markdown(sanitize_html(convert_to_html(markup_text)), unsafe_allow_html=True)
    st.caption(f"{len(markup_text)} chars")

    with st.expander(S.STYLED_SNIPPET):
        snippet_text = st.text_input(S.STYLED_TEXT_LABEL)
        color = st.selectbox(S.STYLED_COLOR_LABEL, [DEFAULT_TEXT_COLOR] + COLORS)
        size = st.select_slider(S.STYLED_SIZE_LABEL, options=list(FONT_SIZES), value=3)
        if snippet_text:
            try:
                snippet = styled_text_html(snippet_text, color, size)
            except ValueError as e:
                st.error(str(e))
            else:
                st.code(snippet, language="html")
                st.markdown(sanitize_html(snippet), unsafe_allow_html=True)

    st.markdown("---")
    doc_id = st.text_input(S.TOOL_ID_LABEL).strip()
    col_load, col_publish = st.columns(2)
    col_load.button(S.LOAD_TOOL, disabled=not doc_id, on_click=on_load_tool, args=(doc_id,))
    if col_publish.button(S.PUBLISH, disabled=not (doc_id and valid)):
        try:
            asyncio.run(db_module.publish_description(doc_id, markup_text))
            st.success(S.PUBLISHED.format(doc_id=doc_id))
        except Exception as e:
            st.error(S.OPERATION_FAILED.format(error=e))
            logging.exception("Publish description failed")


# ----------------- Images & downloads -----------------

def process_uploads(cover_file, screenshot_files) -> Tuple[Optional[ProcessedImage], List[ProcessedImage]]:
    cover = None
    if cover_file is not None:
        cover = crop_and_resize(cover_file.getvalue(), cover_file.name)
    screenshots = [resize_image(f.getvalue(), f.name) for f in screenshot_files or []]
    return cover, screenshots


async def upload_media(cover: Optional[ProcessedImage], screenshots: List[ProcessedImage], download_file) -> dict:
    """Upload processed media sequentially and return the resulting URLs."""
    urls = {'image': None, 'screenshots': [], 'download_url': None, 'size': None}
    if cover:
        urls['image'] = await storage_module.upload_file(cover.data, cover.filename, STORAGE_BUCKET)
    for shot in screenshots:
        urls['screenshots'].append(await storage_module.upload_file(shot.data, shot.filename, STORAGE_BUCKET))
    if download_file is not None:
        data = download_file.getvalue()
        urls['download_url'] = await storage_module.upload_file(data, download_file.name, STORAGE_BUCKET)
        urls['size'] = format_size_mb(len(data))
    return urls


def images_page():
    st.title(S.PAGE_IMAGES)

    cover_file = st.file_uploader(S.COVER_LABEL, type=IMAGE_TYPES)
    screenshot_files = st.file_uploader(S.SCREENSHOTS_LABEL, type=IMAGE_TYPES, accept_multiple_files=True)
    download_file = st.file_uploader(S.DOWNLOAD_LABEL)

    try:
        cover, screenshots = process_uploads(cover_file, screenshot_files)
    except ImageProcessingError as e:
        st.error(str(e))
        return

    if cover:
        st.image(cover.data, caption=f"{cover.filename} ({cover.width}x{cover.height})", width=250)
    if screenshots:
        st.image([s.data for s in screenshots], caption=[f"{s.width}x{s.height}" for s in screenshots], width=200)

    if download_file is not None:
        ok, error_msg = validate_download_file(download_file.name)
        if not ok:
            st.error(error_msg)
            download_file = None
        else:
            st.info(f"{download_file.name}: {format_size_mb(download_file.size)}")

    st.markdown("---")
    doc_id = st.text_input(S.ATTACH_TO_TOOL).strip()
    if not st.button(S.UPLOAD_MEDIA):
        return
    if not (cover or screenshots or download_file):
        st.warning(S.NOTHING_TO_UPLOAD)
        return

    try:
        urls = asyncio.run(upload_media(cover, screenshots, download_file))
        uploaded_count = len(urls['screenshots']) + bool(urls['image']) + bool(urls['download_url'])
        st.success(S.UPLOADED.format(count=uploaded_count))
        st.json(urls)
        if urls['image']:
            st.code(image_html(urls['image']), language="html")
        if doc_id:
            asyncio.run(db_module.update_tool_media(
                doc_id,
                image=urls['image'],
                screenshots=urls['screenshots'],
                download_url=urls['download_url'],
                size=urls['size'],
            ))
            st.success(S.ATTACHED.format(doc_id=doc_id))
    except Exception as e:
        st.error(S.OPERATION_FAILED.format(error=e))
        logging.exception("Media upload failed")


# ----------------- YouTube -----------------

def youtube_page():
    st.title(S.PAGE_YOUTUBE)

    with st.form("youtube_form"):
        title = st.text_input(S.VIDEO_TITLE_LABEL)
        link = st.text_input(S.VIDEO_LINK_LABEL)
        submit = st.form_submit_button(S.VIDEO_ADD)

    if link:
        if is_valid_youtube_url(link):
            try:
                st.video(embed_url(link))
                st.caption(S.VIDEO_SNIPPET)
                st.code(video_html(link), language="html")
            except ValueError:
                st.warning(S.VIDEO_INVALID)
        else:
            st.warning(S.VIDEO_INVALID)

    if submit:
        try:
            doc_id = asyncio.run(db_module.add_youtube_video(title, link))
            st.success(S.VIDEO_ADDED.format(doc_id=doc_id))
        except ValueError as e:
            st.error(str(e))
        except Exception as e:
            st.error(S.OPERATION_FAILED.format(error=e))
            logging.exception("Add YouTube video failed")


# ----------------- APK fix -----------------

def apk_page():
    st.title(S.PAGE_APK)

    apk_upload_section()
    st.markdown("---")

    with st.form("apk_form"):
        bucket_id = st.text_input(S.BUCKET_LABEL, value=STORAGE_BUCKET or "")
        file_id = st.text_input(S.FILE_ID_LABEL)
        submit = st.form_submit_button(S.APK_FIX)

    if not submit or not (bucket_id.strip() and file_id.strip()):
        return

    try:
        result = asyncio.run(storage_module.fix_apk_file(bucket_id.strip(), file_id.strip()))
    except Exception as e:
        st.error(S.OPERATION_FAILED.format(error=e))
        logging.exception("APK fix failed")
        return

    if result['changed']:
        st.success(S.APK_FIXED.format(name=result['name']))
    else:
        st.info(S.APK_ALREADY_OK.format(name=result['name']))
    st.write(result['url'])


def apk_upload_section():
    apk_file = st.file_uploader(S.APK_UPLOAD_LABEL, type=['apk'])
    if not st.button(S.APK_UPLOAD, disabled=apk_file is None):
        return
    try:
        url = asyncio.run(storage_module.upload_file(apk_file.getvalue(), apk_file.name, STORAGE_BUCKET))
    except Exception as e:
        st.error(S.OPERATION_FAILED.format(error=e))
        logging.exception("APK upload failed")
        return
    st.success(S.APK_UPLOADED.format(name=apk_file.name, url=url))


def main():
    """Main dashboard interface."""
    st.sidebar.title(S.SIDEBAR_TITLE)
    pages = {
        S.PAGE_DESCRIPTION: description_page,
        S.PAGE_IMAGES: images_page,
        S.PAGE_YOUTUBE: youtube_page,
        S.PAGE_APK: apk_page,
    }
    view = st.sidebar.radio(S.PAGE_PICKER, list(pages))
    pages[view]()


if __name__ == "__main__":
    main()
