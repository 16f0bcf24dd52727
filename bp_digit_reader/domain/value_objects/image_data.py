"""
Image Data Value Object

An encoded photo of a monitor display, as captured or uploaded.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
from pathlib import Path
import base64


SUFFIX_FORMATS = {
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".png": "png",
    ".bmp": "bmp",
    ".webp": "webp",
}


@dataclass(frozen=True)
class ImageData:
    """
    Encoded image bytes plus where they came from.

    Decoding to pixels happens in the infrastructure layer; this object only
    carries the payload.

    Attributes:
        data: Encoded image (JPEG, PNG, ...)
        source: File path or camera identifier, if known
        format: Container format hint such as "jpeg" or "png"
    """

    data: bytes = field(repr=False)
    source: Optional[str] = None
    format: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.data:
            raise ValueError("ImageData requires a non-empty payload")

    @property
    def size(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return f"ImageData({self.source or 'in-memory'}, {self.format or '?'}, {self.size} bytes)"

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> "ImageData":
        """Read a photo from disk; the format is guessed from the suffix."""
        path = Path(file_path)
        return cls(
            data=path.read_bytes(),
            source=str(path.absolute()),
            format=SUFFIX_FORMATS.get(path.suffix.lower()),
        )

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        format: Optional[str] = None,
        source: Optional[str] = None
    ) -> "ImageData":
        return cls(data=data, source=source, format=format)

    @classmethod
    def from_base64(
        cls,
        encoded: str,
        format: Optional[str] = None,
        source: Optional[str] = None
    ) -> "ImageData":
        """
        Decode a base64 payload.

        ``data:image/<fmt>;base64,...`` URLs are accepted and their media type
        fills in ``format`` when none is given.
        """
        if encoded.startswith("data:"):
            header, _, encoded = encoded.partition(",")
            media_type = header[len("data:"):].split(";")[0]
            if format is None and media_type.startswith("image/"):
                format = media_type[len("image/"):]

        return cls(data=base64.b64decode(encoded), source=source, format=format)
