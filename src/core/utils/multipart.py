"""
multipart/form-data parsing for API Gateway upload requests.

API Gateway hands the raw request body to the Lambda (base64-encoded for
binary media types). The body is fed to ``python_multipart``'s streaming
``MultipartParser``; its callbacks collect headers and data per part.
"""

from dataclasses import dataclass, field

import python_multipart
from aws_lambda_powertools import Logger
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import parse_options_header

from core.models.errors import ValidationError
from core.models.image import UploadedFile
from core.utils.constants import ERROR_CODE_INVALID_MULTIPART

logger = Logger(UTC=True)

MULTIPART_FORM_DATA = b"multipart/form-data"
DEFAULT_PART_CONTENT_TYPE = "application/octet-stream"


def _invalid(message: str) -> ValidationError:
    return ValidationError(message=message, error_code=ERROR_CODE_INVALID_MULTIPART)


@dataclass
class _Part:
    headers: dict[bytes, bytes] = field(default_factory=dict)
    data: bytearray = field(default_factory=bytearray)


class _FormCollector:
    """Callback target for ``MultipartParser``; keeps every part in order."""

    def __init__(self) -> None:
        self.parts: list[_Part] = []
        self.completed = False
        self._header_name = b""
        self._header_value = b""

    def callbacks(self) -> dict:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self.parts.append(_Part())

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        self.parts[-1].data += data[start:end]

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_name += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self.parts[-1].headers[self._header_name.lower()] = self._header_value
        self._header_name = b""
        self._header_value = b""

    def on_end(self) -> None:
        self.completed = True


def _decode(value: bytes, what: str) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise _invalid(f"{what} must be UTF-8 text") from exc


def parse_multipart(body: bytes, content_type: str | None) -> tuple[dict[str, str], list[UploadedFile]]:
    """
    Split a multipart/form-data body into text fields and file parts.

    Args:
        body: Raw (already base64-decoded) request body
        content_type: Value of the request ``Content-Type`` header

    Returns:
        Tuple of (form fields by name, uploaded files in request order)

    Raises:
        ValidationError: If the body is not well-formed multipart/form-data
    """
    media_type, params = parse_options_header(content_type)
    if media_type.lower() != MULTIPART_FORM_DATA:
        raise _invalid("Request must be multipart/form-data")

    boundary = params.get(b"boundary")
    if not boundary:
        raise _invalid("Multipart boundary is missing")

    collector = _FormCollector()
    parser = python_multipart.MultipartParser(boundary, collector.callbacks())
    try:
        parser.write(body)
        parser.finalize()
    except MultipartParseError as exc:
        raise _invalid("Malformed multipart body") from exc

    if not collector.completed:
        raise _invalid("Malformed multipart body")

    fields: dict[str, str] = {}
    files: list[UploadedFile] = []

    for part in collector.parts:
        _, disposition = parse_options_header(part.headers.get(b"content-disposition"))
        name = _decode(disposition.get(b"name", b""), "Field names")

        if b"filename" in disposition:
            part_type, _ = parse_options_header(part.headers.get(b"content-type"))
            files.append(
                UploadedFile(
                    field_name=name,
                    filename=_decode(disposition[b"filename"], "File names"),
                    content_type=part_type.decode("latin-1").lower() or DEFAULT_PART_CONTENT_TYPE,
                    data=bytes(part.data),
                )
            )
            continue

        if not name:
            logger.debug("Skipping multipart part without a field name")
            continue

        fields[name] = _decode(bytes(part.data), "Form fields")

    logger.debug(
        "Parsed multipart body",
        extra={"fields": sorted(fields), "file_count": len(files)},
    )
    return fields, files
