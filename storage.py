# storage.py — rooms are directories under the data root, files are their entries
import mimetypes
import os
import re
import shutil
import time
import uuid
from pathlib import Path
from typing import BinaryIO, List, Optional

from werkzeug.security import safe_join as _werkzeug_safe_join
from werkzeug.utils import secure_filename

from errors import InvalidName, NotFound, TooLarge
from models_files import FileMeta

ROOM_RE = re.compile(r"^[a-z0-9-]{1,40}$")
CHUNK = 64 * 1024
GENERIC_MIMES = ("", "application/octet-stream")


def sanitize_room(name) -> str:
    if not isinstance(name, str):
        raise InvalidName("bad room")
    clean = name.strip().lower()
    if not ROOM_RE.match(clean):
        raise InvalidName("bad room")
    return clean


def safe_name(name) -> str:
    """Last path segment of an untrusted file name."""
    base = str(name or "").replace("\\", "/").rsplit("/", 1)[-1].strip()
    if base in ("", ".", "..") or "\x00" in base:
        raise InvalidName("bad file name")
    return base


def guess_mime(name: str) -> str:
    return mimetypes.guess_type(name)[0] or "application/octet-stream"


def _extension_for(declared_filename: Optional[str], declared_mime: Optional[str]) -> str:
    mime = (declared_mime or "").split(";")[0].strip().lower()
    ext = mimetypes.guess_extension(mime) if mime not in GENERIC_MIMES else None
    if not ext:
        ext = os.path.splitext(secure_filename(declared_filename or ""))[1].lower()
    ext = ext.lstrip(".")
    if not ext or len(ext) > 8 or not ext.isalnum():
        ext = "bin"
    return ext


def new_file_name(declared_filename=None, declared_mime=None) -> str:
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}.{_extension_for(declared_filename, declared_mime)}"


class RoomStore:
    """
    Filesystem-backed store. The directory tree under `data_dir` is the only
    state: a room exists iff its directory exists.
    """

    def __init__(self, data_dir, max_file_bytes: int):
        self.data_dir = Path(data_dir).resolve()
        self.max_file_bytes = int(max_file_bytes)

    # ---------- paths ----------
    def safe_join(self, *parts) -> Path:
        joined = _werkzeug_safe_join(str(self.data_dir), *[str(p) for p in parts])
        if joined is None:
            raise InvalidName("path escapes data root")
        path = Path(joined).resolve()
        if path != self.data_dir and self.data_dir not in path.parents:
            raise InvalidName("path escapes data root")
        return path

    def room_dir(self, room) -> Path:
        return self.safe_join(sanitize_room(room))

    def ensure_base(self):
        self.data_dir.mkdir(parents=True, exist_ok=True)

    # ---------- rooms ----------
    def ensure_room(self, name) -> str:
        room = sanitize_room(name)
        self.ensure_base()
        self.safe_join(room).mkdir(exist_ok=True)
        return room

    def room_exists(self, name) -> bool:
        try:
            return self.room_dir(name).is_dir()
        except InvalidName:
            return False

    def list_rooms(self) -> List[str]:
        self.ensure_base()
        with os.scandir(self.data_dir) as it:
            rooms = [e.name for e in it if e.is_dir(follow_symlinks=False) and ROOM_RE.match(e.name)]
        return sorted(rooms)

    def delete_room(self, name) -> None:
        path = self.room_dir(name)
        if not path.is_dir():
            raise NotFound("room not found")
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            # concurrent delete got there first
            raise NotFound("room not found") from None

    # ---------- files ----------
    def list_files(self, room) -> List[FileMeta]:
        path = self.room_dir(room)
        files = []
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except (FileNotFoundError, NotADirectoryError):
            return []
        for e in entries:
            if not e.is_file(follow_symlinks=False):
                continue
            try:
                st = e.stat(follow_symlinks=False)
            except FileNotFoundError:
                continue
            files.append(FileMeta(name=e.name, size=st.st_size, mtime=st.st_mtime, mime=guess_mime(e.name)))
        files.sort(key=lambda f: f.mtime, reverse=True)
        return files

    def file_path(self, room, name) -> Path:
        path = self.safe_join(sanitize_room(room), safe_name(name))
        if not path.is_file():
            raise NotFound("not found")
        return path

    def save_upload(self, room, stream: BinaryIO, declared_filename=None, declared_mime=None) -> FileMeta:
        """
        Writes `stream` under a generated name inside the room. Oversized
        uploads are rejected and the partial file removed, never truncated.
        """
        room = sanitize_room(room)
        room_path = self.safe_join(room)
        if not room_path.is_dir():
            raise NotFound("room not found")

        name = new_file_name(declared_filename, declared_mime)
        dest = self.safe_join(room, name)
        written = 0
        with open(dest, "xb") as f:
            try:
                while True:
                    chunk = stream.read(CHUNK)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_file_bytes:
                        raise TooLarge(f"file exceeds {self.max_file_bytes} bytes")
                    f.write(chunk)
            except BaseException:
                f.close()
                dest.unlink(missing_ok=True)
                raise
        st = dest.stat()
        return FileMeta(name=name, size=st.st_size, mtime=st.st_mtime, mime=guess_mime(name))

    def delete_file(self, room, name) -> bool:
        """Idempotent: an already-absent file counts as deleted (returns False)."""
        path = self.safe_join(sanitize_room(room), safe_name(name))
        if path.is_dir():
            raise NotFound("not found")
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True
