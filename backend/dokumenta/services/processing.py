"""Upload normalization: image resize/re-encode, PDF pass-through."""
import io
import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from dokumenta.config import Settings
from dokumenta.errors import PayloadTooLarge, UnsupportedMediaType, ValidationError
from dokumenta.services.storage import FileStorage

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
JPEG_MIME_TYPE = "image/jpeg"

ACCEPTED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/pjpeg",
    "image/png",
    "image/webp",
    "image/bmp",
}


@dataclass
class ProcessedFile:
    """Result of processing one upload."""
    stored_filename: str
    stored_size: int
    original_size: int
    compression_ratio_percent: int
    mime_type: str
    file_path: Path


def is_accepted_mime_type(mime_type: str | None) -> bool:
    return (mime_type or "").lower() in ACCEPTED_IMAGE_TYPES | {PDF_MIME_TYPE}


def compression_ratio(original_size: int, stored_size: int) -> int:
    """Percent saved by processing, 0 for an empty original."""
    if original_size <= 0:
        return 0
    return round((1 - stored_size / original_size) * 100)


def generate_stored_filename(document_type: str, extension: str) -> str:
    """Collision-resistant name: {type}_{unix ms}_{random}{ext}."""
    timestamp_ms = int(time.time() * 1000)
    suffix = secrets.randbelow(1_000_000_000)
    return f"{document_type}_{timestamp_ms}_{suffix}{extension}"


def normalize_image(buffer: bytes, max_size: tuple[int, int], quality: int) -> bytes:
    """
    Decode, orient, shrink and re-encode an image as JPEG.
    
    EXIF rotation is applied to the pixels so the output needs no
    viewer-side orientation handling. Images are never upscaled.
    """
    try:
        with Image.open(io.BytesIO(buffer)) as img:
            img = ImageOps.exif_transpose(img)
            img.thumbnail(max_size, Image.Resampling.LANCZOS)
            if img.mode != "RGB":
                img = img.convert("RGB")
            output = io.BytesIO()
            img.save(output, format="JPEG", quality=quality, optimize=True)
    except Image.DecompressionBombError as e:
        raise PayloadTooLarge(f"Image dimensions too large: {e}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise UnsupportedMediaType(f"Could not decode image: {e}") from e
    return output.getvalue()


class FileProcessor:
    """Turns a raw upload buffer into one stored file plus size metrics."""

    def __init__(self, settings: Settings, storage: FileStorage | None = None):
        self.settings = settings
        self.storage = storage or FileStorage.from_settings(settings)

    @property
    def max_image_size(self) -> tuple[int, int]:
        return (self.settings.image_max_width, self.settings.image_max_height)

    def validate(self, buffer: bytes, mime_type: str | None) -> str:
        """Check size and type before any work; return normalized mime type."""
        if not buffer:
            raise ValidationError("Empty file")
        if len(buffer) > self.settings.max_upload_size_bytes:
            raise PayloadTooLarge(
                f"File exceeds {self.settings.max_upload_size_mb} MB limit",
                size=len(buffer),
            )
        if not is_accepted_mime_type(mime_type):
            raise UnsupportedMediaType(f"Unsupported file type: {mime_type}")
        return mime_type.lower()

    def process(
        self,
        buffer: bytes,
        original_filename: str,
        document_type: str,
        mime_type: str | None,
    ) -> ProcessedFile:
        """
        Normalize an upload and write exactly one file to storage.
        
        Every call generates a fresh stored filename, so retrying after a
        failure never overwrites an earlier file.
        """
        mime_type = self.validate(buffer, mime_type)
        original_size = len(buffer)

        if mime_type == PDF_MIME_TYPE:
            if not buffer.startswith(b"%PDF"):
                raise UnsupportedMediaType("File is not a valid PDF")
            data = buffer
            extension = Path(original_filename or "").suffix.lower() or ".pdf"
            stored_mime = PDF_MIME_TYPE
        else:
            data = normalize_image(buffer, self.max_image_size, self.settings.jpeg_quality)
            extension = ".jpg"
            stored_mime = JPEG_MIME_TYPE

        stored_filename = generate_stored_filename(document_type, extension)
        file_path = self.storage.write(stored_filename, data)

        stored_size = len(data)
        ratio = 0 if stored_mime == PDF_MIME_TYPE else compression_ratio(original_size, stored_size)

        logger.info(
            f"Processed {original_filename} -> {stored_filename} "
            f"({original_size} -> {stored_size} bytes, {ratio}%)"
        )
        return ProcessedFile(
            stored_filename=stored_filename,
            stored_size=stored_size,
            original_size=original_size,
            compression_ratio_percent=ratio,
            mime_type=stored_mime,
            file_path=file_path,
        )
