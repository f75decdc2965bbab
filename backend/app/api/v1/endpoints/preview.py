from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse
from app.api.deps import get_preview_store
from app.services.preview_store import PreviewStore

router = APIRouter()


@router.get("/{preview_id}", response_class=HTMLResponse)
def get_preview(preview_id: str, store: PreviewStore = Depends(get_preview_store)):
    """Serve a generated preview document."""
    html = store.get(preview_id)
    if html is None:
        return PlainTextResponse("Preview not found", status_code=404)
    return HTMLResponse(html)
