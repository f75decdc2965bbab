from fastapi import APIRouter
from app.core.ids import new_token
from app.models.schemas import SessionResponse

router = APIRouter()


@router.post("", response_model=SessionResponse)
def create_session():
    """New chat-thread id. Bookkeeping only, the pipeline never sees it."""
    return {"id": new_token()}
