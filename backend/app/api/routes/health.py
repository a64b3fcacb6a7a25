import os

from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(prefix="/health", tags=["health"])


def datastore_status() -> str:
    path = settings.data_path
    if not path.exists():
        return "missing"
    return "ready" if os.access(path, os.R_OK) else "unreadable"


@router.get("", summary="Liveness check with datastore availability")
def healthcheck() -> dict[str, str]:
    return {"status": "ok", "environment": settings.env, "datastore": datastore_status()}
