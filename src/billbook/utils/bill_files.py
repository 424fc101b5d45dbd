"""Local storage for uploaded bill PDFs."""

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from billbook.domain.errors import FieldError, ValidationError

logger = logging.getLogger(__name__)

MAX_BILL_SIZE = 10 * 1024 * 1024  # 10 MB
PDF_MAGIC = b"%PDF-"


@dataclass(frozen=True)
class StoredBillFile:
    """Where an uploaded bill ended up."""

    filename: str
    filepath: str


class BillFileStore:
    """Stores bill PDFs under a single uploads directory.

    Files get a generated name (``bill-<epoch ms>-<12 hex>.pdf``) so uploads
    with the same original name never collide.
    """

    def __init__(self, uploads_dir: str | Path):
        self.uploads_dir = Path(uploads_dir)

    def validate(self, content: bytes, filename: str) -> None:
        """Check that the upload is a PDF within the size limit.

        Raises:
            ValidationError: If the file is empty, too large or not a PDF
        """
        errors = []
        if not filename or not filename.strip():
            errors.append(FieldError("file", "a file name is required"))
        elif Path(filename).suffix.lower() != ".pdf":
            errors.append(FieldError("file", "only PDF files are allowed"))
        if not content:
            errors.append(FieldError("file", "no file uploaded"))
        elif len(content) > MAX_BILL_SIZE:
            errors.append(FieldError("file", "file is larger than 10 MB"))
        elif not content.startswith(PDF_MAGIC):
            errors.append(FieldError("file", "only PDF files are allowed"))
        if errors:
            raise ValidationError("Invalid bill upload", errors)

    def save(self, content: bytes, filename: str) -> StoredBillFile:
        """Validate and write an uploaded bill.

        Args:
            content: Raw file bytes
            filename: Original file name as uploaded

        Returns:
            The original name and the path the file was stored at
        """
        self.validate(content, filename)
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

        unique_suffix = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}"
        path = self.uploads_dir / f"bill-{unique_suffix}.pdf"
        path.write_bytes(content)
        logger.debug(f"Stored bill '{filename}' at {path}")
        return StoredBillFile(filename=Path(filename).name, filepath=str(path))
