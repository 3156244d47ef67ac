from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Personnel Directory Backend",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": "/api",
    }
