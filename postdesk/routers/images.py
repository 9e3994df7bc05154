import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from postdesk.services.image_service import get_image
from postdesk.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_image_root() -> Path:
    return Path(settings.CONTENT_DIR) / settings.IMAGE_PREFIX


@router.get("/images/{image_path:path}")
def serve_image(image_path: str, root: Path = Depends(get_image_root)):
    """
    Serve images from the content directory
    """
    image_data, content_type = get_image(image_path, root=root)

    if not image_data or not content_type:
        raise HTTPException(status_code=404, detail="Image not found")

    headers = {
        "Content-Length": str(len(image_data)),
        "Accept-Ranges": "bytes",
    }

    return Response(content=image_data, media_type=content_type, headers=headers)
