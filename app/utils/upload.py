# app/utils/upload.py
import os
import shutil
import uuid

from fastapi import UploadFile

from app.domain.errors import ValidationError
from app.utils.settings import UPLOAD_DIR, ALLOWED_IMAGE_EXTENSIONS, MAX_FILE_SIZE
from app.utils.logging import get_logger

logger = get_logger(__name__)


def save_upload_file(upload_file: UploadFile | None, subfolder: str = "") -> str | None:
    """Zapisuje obrazek pod losowa nazwa i zwraca sciezke, None gdy nic nie przeslano."""
    if not upload_file or not upload_file.filename:
        return None

    upload_file.file.seek(0, 2)
    file_size = upload_file.file.tell()
    upload_file.file.seek(0)
    if file_size > MAX_FILE_SIZE:
        raise ValidationError(f"Plik jest za duzy (max {MAX_FILE_SIZE // (1024 * 1024)} MB)")

    ext = os.path.splitext(upload_file.filename)[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise ValidationError(
            f"Niedozwolony format pliku. Dozwolone: {', '.join(sorted(ALLOWED_IMAGE_EXTENSIONS))}"
        )

    target_dir = os.path.join(UPLOAD_DIR, subfolder) if subfolder else UPLOAD_DIR
    os.makedirs(target_dir, exist_ok=True)

    file_path = os.path.join(target_dir, f"{uuid.uuid4().hex}{ext}")
    with open(file_path, "wb") as out:
        shutil.copyfileobj(upload_file.file, out)

    return file_path.replace("\\", "/")


def delete_upload_file(file_path: str | None) -> bool:
    """Usuwa poprzedni plik z dysku. True gdy plik zostal usuniety."""
    if not file_path or not os.path.exists(file_path):
        return False
    try:
        os.remove(file_path)
    except OSError as e:
        # rekord juz wskazuje na nowy plik - stary zostaje jako smiec
        logger.warning(f"Nie udalo sie usunac pliku {file_path}: {e}")
        return False
    return True
