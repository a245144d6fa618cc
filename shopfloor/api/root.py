from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Shop Floor Data Manager",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "resources": ["/articles", "/entries", "/metrics"],
    }
