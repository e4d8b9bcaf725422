"""업로드/보정 이미지와 요청·응답 스키마.

DB가 없으므로 모든 모델은 요청 처리 동안만 존재한다.
디스크에 남는 것은 파일 자체뿐이다.
"""

from pydantic import BaseModel, ConfigDict, Field


class UploadedImage(BaseModel):
    """업로드된 원본. 임시 디렉토리에 저장된 뒤 보정 입력으로만 쓰인다."""

    original_filename: str
    stored_path: str
    size: int
    content_type: str


class EnhancedImage(BaseModel):
    """보정 결과 파일. 결과 디렉토리의 파일명이 곧 식별자다."""

    filename: str
    path: str
    url: str


class EnhanceParams(BaseModel):
    """보정 파이프라인 옵션. 비어 있으면 기본값(샤프닝만)으로 동작한다."""

    sharpen: float | None = Field(default=None, gt=0)
    brightness: float | None = Field(default=None, ge=0)
    saturation: float | None = Field(default=None, ge=0)


# --- 요청 스키마 (클라이언트는 camelCase로 보낸다) ---


class ReprocessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_filename: str | None = Field(default=None, alias="targetFilename")
    overlay: str | None = None


class RenameRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    old_filename: str | None = Field(default=None, alias="oldFilename")
    new_filename: str | None = Field(default=None, alias="newFilename")


# --- 응답 스키마 ---


class ProcessedFile(BaseModel):
    original: str
    source_filename: str
    enhanced: str
    url: str


class UploadResponse(BaseModel):
    processed_files: list[ProcessedFile]


class ReprocessResponse(BaseModel):
    success: bool = True
    url: str


class RenameResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    new_filename: str = Field(alias="newFilename")
    url: str
