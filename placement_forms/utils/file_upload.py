"""
File Upload Utility - Validate files attached to form answers.

Accepted formats:
- Documents (.pdf, .doc, .docx, .txt)
- Spreadsheets (.xls, .xlsx, .csv)
- Images (.png, .jpg, .jpeg)

Files are stored as-is in object storage; the answer keeps only the URL.
"""

import random
import re
import time
from typing import Tuple

from fastapi import UploadFile

from placement_forms.core.exceptions import ValidationError


ALLOWED_EXTENSIONS = {
    '.pdf', '.doc', '.docx', '.txt',
    '.xls', '.xlsx', '.csv',
    '.png', '.jpg', '.jpeg',
}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def sanitize_filename(filename: str) -> str:
    """Keep letters, digits, dot, dash and underscore."""
    return re.sub(r'[^a-zA-Z0-9._-]', '_', filename)


def build_object_key(owner_id: str, filename: str) -> str:
    """form_uploads/<owner>/<timestamp>-<random>-<name>, unique per upload."""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"form_uploads/{owner_id}/{unique_suffix}-{sanitize_filename(filename)}"


async def read_upload(file: UploadFile, max_size_mb: int) -> Tuple[bytes, str, str]:
    """
    Read and validate an uploaded file.

    Args:
        file: FastAPI UploadFile
        max_size_mb: Size limit in megabytes

    Returns:
        Tuple of (content, filename, content_type)

    Raises:
        ValidationError on missing name, bad extension, empty or oversized file
    """
    if not file.filename:
        raise ValidationError("No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
        raise ValidationError(f"Unsupported file type '{ext}'. Allowed: {allowed}")

    content = await file.read()

    if not content:
        raise ValidationError("Uploaded file is empty.")

    if len(content) > max_size_mb * 1024 * 1024:
        raise ValidationError(f"File too large. Maximum size: {max_size_mb}MB")

    return content, file.filename, file.content_type or "application/octet-stream"
