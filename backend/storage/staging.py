import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from core.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class StagedUpload:
    """An uploaded file written to a temp location, waiting to be stored."""
    path: Path
    filename: Optional[str] = None
    content_type: Optional[str] = None

    def discard(self):
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to delete staged upload %s: %s", self.path, e)


def stage_upload(
    fileobj: BinaryIO,
    filename: Optional[str] = None,
    content_type: Optional[str] = None,
    staging_dir: Optional[Union[str, Path]] = None,
) -> StagedUpload:
    """Copy an upload stream to a temp file so the store can move it in."""
    suffix = os.path.splitext(filename or "")[1]
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix, dir=staging_dir, mode="wb") as tmp:
        try:
            shutil.copyfileobj(fileobj, tmp)
        except OSError as e:
            tmp.close()
            os.unlink(tmp.name)
            raise StorageError(f"Failed to stage upload: {e}") from e
    return StagedUpload(path=Path(tmp.name), filename=filename, content_type=content_type)
