from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from pathlib import Path

from .deps import require_user_id

VIEWS_DIR = Path(__file__).resolve().parent.parent / "views"

router = APIRouter(tags=["Pages"])

def _page(name: str) -> FileResponse:
    return FileResponse(VIEWS_DIR / name, media_type="text/html")

@router.get("/", include_in_schema=False)
async def home():
    return _page("home.html")

@router.get("/login", include_in_schema=False)
async def login_page():
    return _page("login.html")

@router.get("/register", include_in_schema=False)
async def register_page():
    return _page("register.html")

@router.get("/book", include_in_schema=False, dependencies=[Depends(require_user_id)])
async def book_page():
    return _page("book.html")

@router.get("/manage", include_in_schema=False, dependencies=[Depends(require_user_id)])
async def manage_page():
    return _page("manage.html")
