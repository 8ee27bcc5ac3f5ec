"""Scoped file downloads for report exports.

``scoped_download`` hands out a temporary file in the destination directory.
On a clean exit the temporary file is renamed onto the final name; on any
error it is removed, so a failed export never leaves a partial file behind.
"""

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

logger = logging.getLogger(__name__)


@contextmanager
def scoped_download(dest_path: Path) -> Iterator[BinaryIO]:
    """Open a temporary handle that becomes ``dest_path`` on success.

    Usage::

        with scoped_download(out_dir / "collection-2025-06-15.csv") as fh:
            fh.write(csv_bytes)
    """
    dest_path = Path(dest_path)
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{dest_path.name}.", suffix=".part", dir=dest_path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            yield fh
        os.replace(tmp_path, dest_path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        logger.debug("discarded partial download %s", tmp_path)
        raise


def save_bytes(dest_path: Path, content: bytes) -> Path:
    """Write ``content`` to ``dest_path`` through a scoped download."""
    with scoped_download(dest_path) as fh:
        fh.write(content)
    return Path(dest_path)
