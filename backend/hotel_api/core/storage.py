# hotel_api/core/storage.py
import shutil
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import UploadFile

from hotel_api.core.config import get_settings


def save_uploads(images: Optional[List[UploadFile]]) -> List[str]:
    """
    Write uploaded images into STATIC_UPLOAD_DIR and return their public URLs,
    in upload order. Entries without a filename are skipped.
    """
    settings = get_settings()
    upload_dir = Path(settings.STATIC_UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    urls: List[str] = []
    for img in images or []:
        if not img.filename:
            continue
        filename = f"{uuid.uuid4().hex[:12]}_{Path(img.filename).name}"
        dest = upload_dir / filename
        with dest.open("wb") as f:
            shutil.copyfileobj(img.file, f)
        urls.append(f"/static/uploads/{filename}")
    return urls
