"""Main business card scanner controller."""

import logging
import time
from pathlib import Path

from card_digitizer.extractor.base import Extractor
from card_digitizer.models.record import CardRecord, Metadata, ScanResult
from card_digitizer.sink.base import RecordSink
from card_digitizer.text_parser import extract_record, normalize_record

logger = logging.getLogger(__name__)


class CardScanner:
    """Main controller for digitizing business cards."""

    def __init__(self, extractor: Extractor | None = None, sink: RecordSink | None = None):
        """
        Initialize the scanner with its backends.

        Args:
            extractor: Vision extractor for card photos.
            sink: Destination for saved records.
        """
        self._extractor = extractor
        self._sink = sink

    def scan(self, image_path: str | Path) -> ScanResult:
        """
        Extract a card record from a photo.

        Args:
            image_path: Path to the business card image.

        Returns:
            ScanResult with the record and processing metadata.

        Raises:
            FileNotFoundError: If the image file does not exist.
            ValueError: If no extractor is configured or extraction fails.
        """
        if self._extractor is None:
            raise ValueError("No extractor configured")

        start_time = time.perf_counter()
        result = self._extractor.extract(image_path)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        result.metadata = Metadata(
            extractor_backend=self._extractor.name,
            processing_time_ms=round(elapsed_ms, 2),
        )
        logger.info(
            "Scanned %s with %s in %.0fms%s",
            image_path,
            self._extractor.name,
            elapsed_ms,
            " (heuristic fallback)" if result.used_fallback else "",
        )
        return result

    def parse_text(self, text: str) -> CardRecord:
        """Extract a record from already transcribed card text."""
        return extract_record(text)

    def save(self, record: CardRecord) -> str:
        """
        Persist a reviewed record.

        Args:
            record: Record to save; must have a name. It is normalized first.

        Returns:
            Identifier assigned by the sink.

        Raises:
            ValueError: If the record has no name, no sink is configured,
                or the sink rejects the record.
        """
        record = normalize_record(record)
        if not record.name:
            raise ValueError("Please enter a name before saving.")
        if self._sink is None:
            raise ValueError("No record store configured")

        record_id = self._sink.save(record)
        logger.info("Saved %s to %s as %s", record.name, self._sink.name, record_id)
        return record_id
