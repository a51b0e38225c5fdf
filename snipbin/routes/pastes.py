"""
Paste routes.
Handles create (form and API), fetch (API), and view (HTML) operations.

These handlers are plain functions: FastAPI runs them in its thread pool, so
the blocking file writes and fsyncs of the repository never stall the loop.
"""
import html
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Form, Header, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from snipbin.config import settings
from snipbin.database import PasteRepository, get_repository
from snipbin.errors import (
    CorruptRecordError,
    InvalidTTLError,
    PasteExpiredError,
    PasteNotFoundError,
    WriteFailureError,
)
from snipbin.identifiers import is_valid_id
from snipbin.models import Paste, PasteCreate, PasteResponse, PasteView, check_body, check_title

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Paste not found or expired"


def _get_current_time(x_test_now_ms: Optional[str] = None) -> Optional[float]:
    """
    Get the clock override for expiry checks, respecting TEST_MODE.

    Args:
        x_test_now_ms: Test timestamp header (milliseconds since epoch)

    Returns:
        Epoch seconds from the header, or None to use the real clock
    """
    if settings.TEST_MODE and x_test_now_ms:
        try:
            return int(x_test_now_ms) / 1000
        except (ValueError, TypeError) as e:
            logger.warning(f"Invalid x-test-now-ms header: {e}")

    return None


def _store(repo: PasteRepository, title: str, body: str, ttl: str) -> str:
    """Save a paste, translating store errors into HTTP errors."""
    try:
        return repo.save(title, body, ttl)
    except InvalidTTLError:
        raise HTTPException(status_code=400, detail="Invalid TTL")
    except WriteFailureError as e:
        logger.error(f"Error saving paste {e.paste_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save paste")


def _lookup(repo: PasteRepository, paste_id: str, now: Optional[float]) -> Optional[Paste]:
    """
    Load a paste for display. Every kind of miss returns None.

    Args:
        repo: Paste repository
        paste_id: Raw identifier from the URL
        now: Optional clock override

    Returns:
        The paste, or None if the id is malformed, missing, expired or corrupt
    """
    if not is_valid_id(paste_id):
        return None
    try:
        return repo.load(paste_id, now=now)
    except PasteExpiredError:
        logger.info(f"Paste {paste_id} has expired and was removed")
    except PasteNotFoundError:
        pass
    except CorruptRecordError as e:
        logger.error(f"Corrupt paste record {paste_id}: {e}")
    return None


@router.post("/api/pastes", response_model=PasteResponse, status_code=201)
def create_paste(
    paste: PasteCreate,
    repo: PasteRepository = Depends(get_repository),
) -> PasteResponse:
    """
    Create a new paste.

    Args:
        paste: Paste data (title, body, optional ttl)
        repo: Paste repository

    Returns:
        Paste ID and shareable URL

    Raises:
        HTTPException: 400 on an unknown TTL, 500 if the write fails
    """
    ttl = paste.ttl or settings.DEFAULT_TTL
    paste_id = _store(repo, paste.title, paste.body, ttl)

    base_url = settings.APP_DOMAIN.rstrip("/")
    return PasteResponse(id=paste_id, url=f"{base_url}/{paste_id}", ttl=ttl)


@router.get("/api/pastes/{paste_id}", response_model=PasteView)
def fetch_paste(
    paste_id: str,
    x_test_now_ms: Optional[str] = Header(None),
    repo: PasteRepository = Depends(get_repository),
) -> PasteView:
    """
    Fetch a paste (API endpoint).

    Raises:
        HTTPException: 404 if the paste is malformed, missing, expired or corrupt
    """
    paste = _lookup(repo, paste_id, _get_current_time(x_test_now_ms))
    if paste is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)

    return PasteView(
        id=paste.id,
        title=paste.title,
        body=paste.text,
        ttl=paste.ttl,
        created_at=paste.created_at.isoformat(),
        expires_at=paste.expires_at.isoformat(),
    )


@router.post("/save")
def save_paste(
    title: str = Form(""),
    body: str = Form(""),
    ttl: str = Form(""),
    repo: PasteRepository = Depends(get_repository),
) -> RedirectResponse:
    """Create a paste from the HTML form and redirect to its page."""
    if len(title) > settings.MAX_TITLE_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Title too long (max {settings.MAX_TITLE_LENGTH} chars)",
        )
    if not title or not body:
        raise HTTPException(status_code=400, detail="Title and content required")
    try:
        check_title(title)
        check_body(body)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    paste_id = _store(repo, title, body, ttl or settings.DEFAULT_TTL)
    return RedirectResponse(url=f"/{paste_id}", status_code=302)


@router.get("/{paste_id}", response_class=HTMLResponse)
def view_paste(
    paste_id: str,
    x_test_now_ms: Optional[str] = Header(None),
    repo: PasteRepository = Depends(get_repository),
) -> HTMLResponse:
    """View a paste as HTML, or a 404 page on any miss."""
    paste = _lookup(repo, paste_id, _get_current_time(x_test_now_ms))
    if paste is None:
        return HTMLResponse(_render_404_page(), status_code=404)
    return HTMLResponse(_render_paste_page(paste))


def _render_paste_page(paste: Paste) -> str:
    title = html.escape(paste.title)
    content = html.escape(paste.text)
    remaining = paste.expires_at - datetime.now(timezone.utc)
    minutes = max(int(remaining.total_seconds() // 60), 0)

    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - Snipbin</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Arial, sans-serif;
            max-width: 900px;
            margin: 40px auto;
            padding: 0 20px;
            color: #333;
        }}
        .meta {{
            color: #666;
            font-size: 12px;
            margin-bottom: 20px;
            font-family: monospace;
        }}
        .content {{
            background: #f5f5f5;
            border: 1px solid #ddd;
            border-radius: 5px;
            padding: 20px;
            font-family: "Courier New", monospace;
            font-size: 14px;
            white-space: pre-wrap;
            word-wrap: break-word;
        }}
    </style>
</head>
<body>
    <h1>{title}</h1>
    <div class="meta">ID: {paste.id} &middot; TTL: {paste.ttl} &middot; expires in {minutes // 60}h {minutes % 60}m</div>
    <div class="content">{content}</div>
    <p><a href="/">Create a new paste</a></p>
</body>
</html>"""


def _render_404_page() -> str:
    """Render a 404 error page."""
    return """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Not Found - Snipbin</title>
</head>
<body style="font-family: sans-serif; text-align: center; margin-top: 80px;">
    <h1>404</h1>
    <p>This paste was not found or has expired.</p>
    <a href="/">Create a new paste</a>
</body>
</html>"""
