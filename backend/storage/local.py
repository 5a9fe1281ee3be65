"""
Local filesystem storage for item photos.

Objects are addressed by opaque references handed out by ``store``. A
reference is the object's file name inside the storage root; callers must not
rely on that and should only pass references back to this store.
"""

import logging
import os
import shutil
import time
import uuid
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from core.errors import AttachmentNotFound, StorageError

logger = logging.getLogger(__name__)

# Size in bytes for reading/writing file chunks
FILE_CHUNK_SIZE = 8192

Source = Union[bytes, bytearray, BinaryIO, str, os.PathLike]


class LocalAttachmentStore:
    """
    Stores attachment objects as flat files under a single directory.
    """

    def __init__(self, root: Union[str, Path], create: bool = True):
        """
        Args:
            root: Storage directory
            create: Create the directory (and parents) if it is missing
        """
        self.root = Path(root).resolve()
        if create and not self.root.exists():
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create storage directory {self.root}: {e}") from e
            logger.info("Created storage directory %s", self.root)

    def _new_ref(self, filename: Optional[str]) -> str:
        ext = Path(filename).suffix.lower() if filename else ""
        # Millisecond timestamp keeps names sortable, the random part keeps them unique
        return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}{ext}"

    def _resolve(self, ref: str) -> Path:
        """
        Map a reference to its absolute path, refusing anything that escapes the root.
        """
        if not ref or not isinstance(ref, str):
            raise ValueError(f"Invalid reference: {ref!r}")
        path = (self.root / ref).resolve()
        try:
            path.relative_to(self.root)
        except ValueError:
            raise ValueError(f"Path traversal detected: {ref}")
        return path

    def _check_writable(self):
        if not self.root.is_dir() or not os.access(self.root, os.W_OK):
            raise StorageError(f"Storage directory {self.root} is not writable")

    def store(self, source: Source, filename: Optional[str] = None) -> str:
        """
        Persist content under a fresh reference.

        ``source`` may be raw bytes, a readable binary file object, or the path
        of a staged file. Staged files are moved into the store, so the path
        no longer exists once this returns.

        Returns:
            The opaque reference for the stored object

        Raises:
            StorageError: If the storage root is unwritable or the write fails
        """
        self._check_writable()

        if isinstance(source, (str, os.PathLike)) and filename is None:
            filename = os.fspath(source)
        ref = self._new_ref(filename)
        dest = self._resolve(ref)

        try:
            if isinstance(source, (bytes, bytearray)):
                with open(dest, "xb") as f:
                    f.write(source)
            elif isinstance(source, (str, os.PathLike)):
                shutil.move(os.fspath(source), dest)
            else:
                with open(dest, "xb") as f:
                    while chunk := source.read(FILE_CHUNK_SIZE):
                        f.write(chunk)
        except FileExistsError as e:
            raise StorageError(f"Reference collision for {ref}") from e
        except OSError as e:
            # Never leave a partially written object behind
            if dest.exists():
                dest.unlink()
            raise StorageError(f"Failed to store attachment: {e}") from e

        logger.debug("Stored attachment %s", ref)
        return ref

    def exists(self, ref: Optional[str]) -> bool:
        if not ref:
            return False
        try:
            return self._resolve(ref).is_file()
        except ValueError:
            return False

    def path(self, ref: Optional[str]) -> Path:
        """
        Absolute path of a stored object, for streaming it back to a client.

        Raises:
            AttachmentNotFound: If the reference does not resolve to a file
        """
        if not self.exists(ref):
            raise AttachmentNotFound(ref)
        return self._resolve(ref)

    def read(self, ref: Optional[str]) -> bytes:
        path = self.path(ref)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            # Removed between the existence check and the read
            raise AttachmentNotFound(ref)

    def remove(self, ref: Optional[str]) -> None:
        """
        Delete a stored object. A missing object counts as already removed.

        Raises:
            StorageError: If the object exists but cannot be deleted
        """
        if not ref:
            return
        try:
            path = self._resolve(ref)
        except ValueError as e:
            raise StorageError(str(e)) from e
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Failed to remove attachment {ref}: {e}") from e
        logger.debug("Removed attachment %s", ref)

    def list_refs(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_file())
