# models_files.py
from dataclasses import dataclass

IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif", "image/avif")


@dataclass(frozen=True)
class FileMeta:
    name: str
    size: int       # bytes
    mtime: float    # epoch seconds
    mime: str       # inferred from the extension, never stored

    @property
    def is_image(self) -> bool:
        return self.mime in IMAGE_TYPES

    @property
    def is_video(self) -> bool:
        return self.mime.startswith("video/")

    @property
    def size_label(self) -> str:
        if self.size < 1024:
            return f"{self.size} B"
        if self.size < 1024 * 1024:
            return f"{self.size / 1024:.1f} KB"
        return f"{self.size / 1024 / 1024:.1f} MB"

    def to_dict(self):
        return dict(name=self.name, size=self.size, mtime=self.mtime, mime=self.mime)
