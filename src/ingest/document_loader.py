from __future__ import annotations
import base64
import os
from src.utils.config import AppConfig
from src.utils.exception import UnsupportedFileTypeError, EmptyDocumentError, DocumentTooLargeError
from src.utils.logger import logger
from src.utils.types import UploadedDocument, DocumentPart

GENERIC_MEDIA_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


def resolve_media_type(name: str, reported_type: str | None, config: AppConfig) -> str | None:
    """Return the accepted media type for an upload, or None if it is not accepted.

    Browsers sometimes report nothing (or octet-stream) for plain text files, so
    the extension decides in that case. A reported type that is specific but not
    accepted is never overridden by the extension.
    """
    accepted = set(config.accepted_media_types.values())
    reported = (reported_type or "").split(";")[0].strip().lower()
    if reported in accepted:
        return reported
    if reported in GENERIC_MEDIA_TYPES:
        ext = os.path.splitext(name)[1].lower()
        return config.accepted_media_types.get(ext)
    return None


def load_document(uploaded_file, config: AppConfig) -> UploadedDocument:
    """Validate a picked/dropped file and read it into an UploadedDocument.

    Raises a DocumentError subclass for anything the reviewer cannot send.
    """
    name = getattr(uploaded_file, "name", None) or "Agreement"
    mime_type = resolve_media_type(name, getattr(uploaded_file, "type", None), config)
    if mime_type is None:
        logger.info("Rejected upload %s (type=%s)", name, getattr(uploaded_file, "type", None))
        raise UnsupportedFileTypeError(name, getattr(uploaded_file, "type", None))
    if hasattr(uploaded_file, "getvalue"):
        data = uploaded_file.getvalue()
    else:
        data = uploaded_file.read()
    if not data:
        raise EmptyDocumentError(name)
    if len(data) > config.max_upload_bytes:
        raise DocumentTooLargeError(name, len(data), config.max_upload_bytes)
    logger.debug("Loaded %s (%s, %d bytes)", name, mime_type, len(data))
    return UploadedDocument(name=name, mime_type=mime_type, data=data)


def encode_document(document: UploadedDocument) -> DocumentPart:
    return DocumentPart(data=base64.b64encode(document.data).decode("ascii"), mime_type=document.mime_type)
