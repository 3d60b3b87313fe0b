from dataclasses import dataclass
from enum import Enum
from typing import Optional

from grading_desk.core.config import ZOOM_DEFAULT, ZOOM_MAX, ZOOM_MIN, ZOOM_STEP
from grading_desk.schemas.submission import SubmittedFile


class FileKind(str, Enum):
    PAGED = "paged"  # pdf, rendered page by page
    IMAGE = "image"
    DOWNLOAD = "download"  # no inline preview


_KIND_BY_EXTENSION = {
    "pdf": FileKind.PAGED,
    "png": FileKind.IMAGE,
    "jpg": FileKind.IMAGE,
    "jpeg": FileKind.IMAGE,
}


def file_kind_for(file_name: str) -> FileKind:
    ext = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    return _KIND_BY_EXTENSION.get(ext, FileKind.DOWNLOAD)


def initial_preview_file(files: list[SubmittedFile]) -> Optional[SubmittedFile]:
    """First pdf attachment, else the first attachment, else None."""
    for f in files:
        if file_kind_for(f.file_name) is FileKind.PAGED:
            return f
    return files[0] if files else None


@dataclass
class FilePreview:
    file: Optional[SubmittedFile] = None
    url: Optional[str] = None
    loading: bool = False
    failed: bool = False

    # paged documents only
    page: int = 1
    page_count: Optional[int] = None
    zoom: float = ZOOM_DEFAULT

    @property
    def kind(self) -> Optional[FileKind]:
        if self.file is None:
            return None
        return file_kind_for(self.file.file_name)

    @property
    def shows_inline(self) -> bool:
        if self.url is None or self.failed:
            return False
        return self.kind in (FileKind.PAGED, FileKind.IMAGE)

    @property
    def offers_download_only(self) -> bool:
        """True when the selected file cannot be rendered and must be downloaded."""
        if self.file is None or self.loading:
            return False
        return self.failed or self.kind is FileKind.DOWNLOAD

    def document_loaded(self, page_count: int) -> None:
        self.page_count = max(1, page_count)
        self.page = min(self.page, self.page_count)

    def document_failed(self) -> None:
        self.failed = True

    def go_to_page(self, page: int) -> int:
        if self.page_count is None:
            return self.page
        self.page = min(max(1, page), self.page_count)
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    def zoom_in(self) -> float:
        self.zoom = min(ZOOM_MAX, round(self.zoom + ZOOM_STEP, 2))
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = max(ZOOM_MIN, round(self.zoom - ZOOM_STEP, 2))
        return self.zoom
