"""
Flat-file storage for submission artifacts.

Every submission leaves up to three files in the output directory:

    generated-invoices/
        invoice-{number}-request.json
        invoice-{number}-response.json
        invoice-{number}-qr.png

Design Decisions:
- Files are keyed by invoice number only; re-submitting overwrites
- Writes are best-effort: faults are logged and recorded, never raised,
  so a disk problem cannot turn a successful KRA submission into a failure
- Write to a temp file, then rename, so readers never see half a file
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class ArtifactKind(Enum):
    """Artifact types and their filename suffixes."""
    REQUEST = "-request.json"
    RESPONSE = "-response.json"
    QR = "-qr.png"


@dataclass(frozen=True)
class WriteFailure:
    """A write that was suppressed."""
    filename: str
    error: str


def artifact_filename(kind: ArtifactKind, invoice_number: str) -> str:
    return f"invoice-{invoice_number}{kind.value}"


class ArtifactStore:
    """
    Local directory of request, response and QR artifacts.

    Example:
        store = ArtifactStore(Path("./generated-invoices"))
        await store.save_request_json("INV-001", '{"invoiceNumber":"INV-001"}')
        store.list_files()
    """

    def __init__(self, output_directory: Path) -> None:
        """
        Initialize the store.

        Args:
            output_directory: Directory for artifacts; created if missing
        """
        self._output_root = Path(output_directory).resolve()
        self.write_failures: list[WriteFailure] = []
        try:
            self._output_root.mkdir(parents=True, exist_ok=True)
            logger.info(f"Artifact store initialized at {self._output_root}")
        except OSError as e:
            logger.error(f"Could not create output directory {self._output_root}: {e}")

    @property
    def output_root(self) -> Path:
        return self._output_root

    async def save(
        self,
        kind: ArtifactKind,
        invoice_number: str,
        content: str | bytes,
    ) -> Path | None:
        """
        Write one artifact.

        Text is written as UTF-8, bytes as-is.

        Returns:
            Path of the written file, or None if the write failed
        """
        filename = artifact_filename(kind, invoice_number)
        file_path = self._output_root / filename
        temp_path = self._output_root / f"{filename}.tmp"

        data = content.encode("utf-8") if isinstance(content, str) else content

        try:
            if Path(filename).name != filename:
                raise ValueError(f"Path traversal not allowed: {filename}")
            self._output_root.mkdir(parents=True, exist_ok=True)
            temp_path.write_bytes(data)
            temp_path.replace(file_path)
        except (OSError, ValueError) as e:
            logger.error(
                f"Error saving {kind.name.lower()} artifact for {invoice_number}",
                exc_info=True,
            )
            self.write_failures.append(WriteFailure(filename=filename, error=str(e)))
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.debug(f"Could not remove temp file {temp_path}")
            return None

        logger.info(f"Saved {kind.name.lower()} artifact to {file_path}")
        return file_path

    async def save_request_json(self, invoice_number: str, json_content: str) -> Path | None:
        return await self.save(ArtifactKind.REQUEST, invoice_number, json_content)

    async def save_response_json(
        self,
        invoice_number: str,
        json_content: str,
        is_success: bool = True,
    ) -> Path | None:
        path = await self.save(ArtifactKind.RESPONSE, invoice_number, json_content)
        if path is not None:
            logger.info(f"Response for {invoice_number} stored (Success: {is_success})")
        return path

    async def save_qr_png(self, invoice_number: str, png_bytes: bytes) -> Path | None:
        return await self.save(ArtifactKind.QR, invoice_number, png_bytes)

    def list_files(self) -> list[str]:
        """
        List generated files, newest invoice numbers first.

        Returns:
            File names in reverse-lexicographic order (empty on error)
        """
        try:
            if not self._output_root.is_dir():
                return []
            names = [p.name for p in self._output_root.iterdir() if p.is_file()]
        except OSError:
            logger.exception("Error getting generated files list")
            return []
        return sorted(names, reverse=True)
