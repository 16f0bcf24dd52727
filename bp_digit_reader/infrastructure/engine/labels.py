"""
Label Table Loader

Reads the class names of the digit model, one label per line.
"""

from pathlib import Path
from typing import Tuple, Union
import logging

from ...domain.exceptions import LabelFileError


logger = logging.getLogger(__name__)


def parse_labels(text: str) -> Tuple[str, ...]:
    """
    Parse label file contents.

    Reading stops at the first empty line, so trailing blank lines and
    anything after a blank separator are ignored.
    """
    labels = []
    for line in text.splitlines():
        label = line.strip()
        if not label:
            break
        labels.append(label)
    return tuple(labels)


def load_labels(path: Union[str, Path]) -> Tuple[str, ...]:
    """
    Load the ordered label table.

    Args:
        path: Path to a UTF-8 text file

    Returns:
        Tuple of class names, index-aligned with the model's score channels

    Raises:
        LabelFileError: If the file is missing, unreadable or empty
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise LabelFileError(str(path), str(e))

    labels = parse_labels(text)
    if not labels:
        raise LabelFileError(str(path), "file contains no labels")

    logger.debug(f"Loaded {len(labels)} labels from {path}")
    return labels
