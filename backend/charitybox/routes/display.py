from fastapi import APIRouter, Depends

from charitybox.deps import get_display_store
from charitybox.schemas.display import DisplayMessageUpdate
from charitybox.services.display import DisplayMessageStore

router = APIRouter(prefix="/api", tags=["LCD"])


@router.get("/lcd-message")
def get_lcd_message(store: DisplayMessageStore = Depends(get_display_store)):
    return {
        "success": True,
        "message": store.get(),
        "info": f"At most {store.max_chars} characters per line for the 16x2 LCD",
    }


@router.post("/lcd-message")
def update_lcd_message(
    payload: DisplayMessageUpdate,
    store: DisplayMessageStore = Depends(get_display_store),
):
    message = store.set(payload.line1, payload.line2)
    return {
        "success": True,
        "message": "LCD message updated",
        "data": message,
    }
