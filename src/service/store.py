"""파일 저장소.

결과 디렉토리는 파일명으로만 주소 지정되는 평평한 디렉토리다 (DB/인덱스 없음).
동시에 들어온 요청끼리 잠금은 없다. 같은 이름을 건드리면 나중 작업이 이긴다.
"""

import os
import random
import time
from typing import BinaryIO

from core.config import settings
from core.exceptions import FileTooLarge, ValidationFailed

CHUNK_SIZE = 1024 * 1024


def ensure_directories() -> None:
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    os.makedirs(settings.RESULTS_DIR, exist_ok=True)


def bare_filename(name: str) -> str:
    """디렉토리 부분을 모두 떼어낸 파일명만 남긴다 (경로 탐색 방지).

    "../../etc/passwd" → "passwd", "a\\b.png" → "b.png"
    """
    bare = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if bare in ("", ".", "..") or "\x00" in bare:
        raise ValidationFailed(f"올바르지 않은 파일명입니다: {name!r}")
    return bare


def now_ms() -> int:
    return int(time.time() * 1000)


class ResultStore:
    """보정 결과 파일 저장소."""

    def __init__(self, directory: str | None = None, url_prefix: str = "/results"):
        self.directory = directory or settings.RESULTS_DIR
        self.url_prefix = url_prefix.rstrip("/")

    def path_for(self, filename: str) -> str:
        return os.path.join(self.directory, bare_filename(filename))

    def exists(self, filename: str) -> bool:
        return os.path.isfile(self.path_for(filename))

    def url_for(self, filename: str, cache_bust: bool = False) -> str:
        url = f"{self.url_prefix}/{filename}"
        if cache_bust:
            url += f"?t={now_ms()}"
        return url

    def unique_enhanced_name(self, original_filename: str) -> str:
        """enhanced_<base>_<timestamp>.<ext> 형식의 아직 없는 파일명을 만든다.

        같은 밀리초에 같은 원본명이 들어오면 timestamp를 1씩 올린다.
        """
        base, ext = os.path.splitext(bare_filename(original_filename))
        stamp = now_ms()
        while True:
            name = f"enhanced_{base}_{stamp}{ext}"
            if not os.path.exists(os.path.join(self.directory, name)):
                return name
            stamp += 1

    def list_files(self) -> list[str]:
        """디렉토리 안의 일반 파일 이름 목록 (정렬)."""
        return sorted(
            entry.name for entry in os.scandir(self.directory) if entry.is_file()
        )

    def rename(self, old_filename: str, new_filename: str) -> None:
        os.rename(self.path_for(old_filename), self.path_for(new_filename))


class UploadStore:
    """업로드 원본 임시 저장소. 처리 후에도 따로 정리하지 않는다."""

    def __init__(self, directory: str | None = None, max_size: int | None = None):
        self.directory = directory or settings.UPLOAD_DIR
        self.max_size = max_size or settings.MAX_FILE_SIZE

    def temp_name(self, original_filename: str, field: str = "files") -> str:
        ext = os.path.splitext(bare_filename(original_filename))[1]
        return f"{field}-{now_ms()}-{random.randint(0, 10**9 - 1)}{ext}"

    def save(self, stream: BinaryIO, original_filename: str) -> tuple[str, int]:
        """스트림을 청크 단위로 복사하며 크기 제한을 검사한다.

        (저장 경로, 바이트 수)를 반환. 제한을 넘으면 쓰던 파일을 지우고 FileTooLarge.
        """
        path = os.path.join(self.directory, self.temp_name(original_filename))
        written = 0
        with open(path, "wb") as out:
            while chunk := stream.read(CHUNK_SIZE):
                written += len(chunk)
                if written > self.max_size:
                    break
                out.write(chunk)

        if written > self.max_size:
            os.remove(path)
            limit_mb = self.max_size // (1024 * 1024)
            raise FileTooLarge(f"파일 크기가 {limit_mb}MB 제한을 초과했습니다: {original_filename}")
        return path, written
