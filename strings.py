"""
Centralized user-facing strings for the admin dashboard.

Keeps page titles, prompts and messages in one place so the pages only
carry layout logic.
"""


class Strings:
    """Central repository for all strings used in the dashboard."""

    # Navigation
    APP_TITLE = "Content Tools - Admin Dashboard"
    SIDEBAR_TITLE = "Content Tools"
    PAGE_PICKER = "Choose a page"
    PAGE_DESCRIPTION = "Description markup"
    PAGE_IMAGES = "Images & downloads"
    PAGE_YOUTUBE = "YouTube"
    PAGE_APK = "APK fix"

    # Description markup
    DESCRIPTION_HELP = (
        "Use [center], [underline], [bold], [size=sm|md|lg], [color=red|green|blue], "
        "[link href=\"URL\"]text[/link] and [bar/] tags."
    )
    FORMAT_TARGET_LABEL = "Text to format (first match; empty inserts at the end)"
    DESCRIPTION_LABEL = "Description"
    LINK_URL_LABEL = "Link URL (for the Link button)"
    MARKUP_VALID = "Tags are balanced."
    MARKUP_INVALID = "Unbalanced formatting tags: {error}"
    PREVIEW = "Preview"
    TOOL_ID_LABEL = "Tool document ID"
    PUBLISH = "Publish description"
    PUBLISHED = "Description saved to {doc_id}."
    TOOL_NOT_FOUND = "No tool with ID {doc_id}."
    LOAD_TOOL = "Load current description"
    STYLED_SNIPPET = "Styled text snippet (rich editor)"
    STYLED_TEXT_LABEL = "Text"
    STYLED_COLOR_LABEL = "Colour"
    STYLED_SIZE_LABEL = "Font size (1-7)"

    # Images & downloads
    COVER_LABEL = "Cover image (cropped to 500x500)"
    SCREENSHOTS_LABEL = "Screenshots (resized to fit 800px)"
    DOWNLOAD_LABEL = "Download file (.zip / .exe)"
    UPLOAD_MEDIA = "Upload to storage"
    ATTACH_TO_TOOL = "Attach uploads to tool (optional ID)"
    UPLOADED = "Uploaded {count} file(s)."
    ATTACHED = "Tool {doc_id} updated."
    NOTHING_TO_UPLOAD = "Choose at least one file first."

    # YouTube
    VIDEO_TITLE_LABEL = "Video title"
    VIDEO_LINK_LABEL = "YouTube link"
    VIDEO_INVALID = "Please enter a valid YouTube URL."
    VIDEO_ADD = "Add video"
    VIDEO_ADDED = "YouTube video added (ID: {doc_id})."
    VIDEO_SNIPPET = "Editor embed snippet"

    # APK fix
    BUCKET_LABEL = "Bucket ID"
    FILE_ID_LABEL = "File ID"
    APK_FIX = "Fix APK download"
    APK_ALREADY_OK = "{name} already downloads as an APK."
    APK_FIXED = "Renamed to {name}."
    APK_UPLOAD_LABEL = "Upload a new APK"
    APK_UPLOAD = "Upload APK"
    APK_UPLOADED = "Uploaded {name}: {url}"

    # Errors
    CONFIG_ERROR = "Environment error: {error}"
    OPERATION_FAILED = "Operation failed: {error}"
