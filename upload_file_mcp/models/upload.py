"""
Pydantic models for the upload pipeline.

Sources, multipart forms and the success/failure result returned by the
upload tools. Everything here lives for a single tool invocation.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel


class SourceKind(str, Enum):
    """Which variant of source identifier the caller passed."""

    HTTP = "http"
    FILE_URI = "file_uri"
    PATH = "path"


class FileSource(BaseModel):
    """
    A parsed source identifier.

    ``location`` is the URL for HTTP sources and the resolved filesystem path
    for ``file://`` URIs and bare paths.
    """

    kind: SourceKind
    location: str

    @property
    def is_remote(self) -> bool:
        return self.kind is SourceKind.HTTP


class FormPart(BaseModel):
    """A single named part of a multipart form."""

    name: str
    value: Union[bytes, str]
    filename: Optional[str] = None  # set only for binary file parts
    content_type: Optional[str] = None


class MultipartForm(BaseModel):
    """Ordered collection of form parts. Parts are appended, never replaced."""

    parts: list[FormPart] = []

    def append(
        self,
        name: str,
        value: Union[bytes, str],
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> None:
        self.parts.append(
            FormPart(name=name, value=value, filename=filename, content_type=content_type)
        )

    def get_all(self, name: str) -> list[Union[bytes, str]]:
        """Return every value appended under ``name``, in insertion order."""
        return [part.value for part in self.parts if part.name == name]

    def to_httpx_files(self) -> list[tuple]:
        """
        Render the form as an ``httpx`` ``files`` list.

        Plain string fields are sent with a ``None`` filename so httpx encodes
        them without a ``filename=`` parameter. Passing every part through
        ``files`` keeps the insertion order on the wire (``data=`` fields would
        otherwise be written before all file parts).
        """
        files = []
        for part in self.parts:
            if part.filename is None:
                files.append((part.name, (None, part.value)))
            else:
                files.append(
                    (part.name, (part.filename, part.value, part.content_type))
                )
        return files


class UploadSuccess(BaseModel):
    """The upload endpoint answered; ``body`` is its response text, verbatim."""

    ok: Literal[True] = True
    body: str

    @property
    def text(self) -> str:
        return self.body


class UploadFailure(BaseModel):
    """A configuration, resolution or conversion failure reported to the caller."""

    ok: Literal[False] = False
    message: str

    @property
    def text(self) -> str:
        return self.message


UploadResult = Union[UploadSuccess, UploadFailure]
