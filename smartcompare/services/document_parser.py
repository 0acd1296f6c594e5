# smartcompare/services/document_parser.py
from langchain_community.document_loaders import PyPDFLoader, TextLoader
from typing import Union
from pathlib import Path
import logging

from smartcompare.core.errors import DocumentDecodeError

logger = logging.getLogger(__name__)

class DocumentParser:
    @staticmethod
    def load_text(file_path: Union[str, Path]) -> str:
        """
        Loads a document and returns its plain text.

        PDFs are read page by page and the pages joined with newlines; every
        other file is decoded as UTF-8 text. Raises DocumentDecodeError when
        the file is missing or cannot be decoded.
        """
        path = Path(file_path)
        if not path.exists():
            logger.error(f"File not found: {file_path}")
            raise DocumentDecodeError(path.name, "file not found")
        try:
            if path.suffix.lower() == ".pdf":
                pages = PyPDFLoader(str(path)).load()
                logger.info(f"Loaded {len(pages)} pages from {path.name}")
                return "\n".join(page.page_content for page in pages)
            docs = TextLoader(str(path), encoding="utf-8").load()
            return "\n".join(doc.page_content for doc in docs)
        except Exception as e:
            logger.error(f"Error loading document {file_path}: {e}")
            raise DocumentDecodeError(path.name, str(e)) from e

    @staticmethod
    def save_upload(upload_dir: Union[str, Path], filename: str, data: bytes) -> Path:
        upload_path = Path(upload_dir)
        upload_path.mkdir(parents=True, exist_ok=True)
        target = upload_path / Path(filename).name
        with open(target, "wb") as f:
            f.write(data)
        logger.info(f"Saved upload: {target}")
        return target
