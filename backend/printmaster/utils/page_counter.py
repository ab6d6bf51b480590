from io import BytesIO

from pdfminer.pdfpage import PDFPage
from PIL import Image, UnidentifiedImageError

PDF_MAGIC = b"%PDF"


class PageCountError(Exception):
    pass


def count_pdf_pages(content: bytes) -> int:
    try:
        return sum(1 for _ in PDFPage.get_pages(BytesIO(content)))
    except Exception as e:
        raise PageCountError(f"unreadable PDF: {e}") from e


def count_image_frames(content: bytes) -> int:
    """Single images are one page; multi-frame images (TIFF, GIF) count each frame."""
    try:
        with Image.open(BytesIO(content)) as img:
            return int(getattr(img, "n_frames", 1) or 1)
    except (UnidentifiedImageError, OSError) as e:
        raise PageCountError(f"unreadable image: {e}") from e
    except Image.DecompressionBombError as e:
        raise PageCountError(f"image too large: {e}") from e


def count_pages(content: bytes, content_type: str = "") -> int:
    if not content:
        raise PageCountError("empty file")

    if content_type == "application/pdf" or content.startswith(PDF_MAGIC):
        pages = count_pdf_pages(content)
    elif content_type.startswith("image/") or not content_type:
        pages = count_image_frames(content)
    else:
        raise PageCountError(f"unsupported file type: {content_type}")

    if pages <= 0:
        raise PageCountError("no pages detected")
    return pages
