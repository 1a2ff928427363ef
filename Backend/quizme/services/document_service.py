import logging

from quizme.utils.config import Settings, settings as default_settings
from quizme.utils.file_processing import EXTRACTORS, clean_text, detect_format

logger = logging.getLogger(__name__)

class DocumentService:
    """Turns uploaded document bytes into normalized study text.

    Holds configuration only; one instance is shared by every request.
    """

    def __init__(self, settings: Settings = None):
        self.settings = settings or default_settings

    def extract_text(self, file_bytes: bytes, filename: str) -> str:
        """Extract and normalize the text of a PDF or DOCX upload.

        Raises UnsupportedFormat for any other extension and ExtractionFailure
        when the underlying parser cannot read the file.
        """
        document_format = detect_format(filename)
        logger.info(f"Extracting {document_format.value} text from {filename} ({len(file_bytes)} bytes)")
        raw_text = EXTRACTORS[document_format](file_bytes)
        text = clean_text(raw_text)
        logger.info(f"Extracted {len(text)} characters from {filename}")
        return text

    def is_sufficient(self, text: str) -> bool:
        return len(clean_text(text)) >= self.settings.min_text_length
