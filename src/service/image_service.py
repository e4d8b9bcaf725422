import io
import os
import re
import zipfile

from fastapi import UploadFile
from loguru import logger
from PIL import Image, UnidentifiedImageError

from core.config import settings
from core.exceptions import (
    FileTooLarge,
    FilenameConflict,
    ImageNotFound,
    ProcessingFailed,
    StorageError,
    UnsupportedFileType,
    ValidationFailed,
)
from model.image import EnhancedImage, EnhanceParams, ProcessedFile, UploadedImage
from processor import codec, pipeline
from service.store import ResultStore, UploadStore, bare_filename

# Pillow가 디코딩/인코딩 단계에서 던지는 예외들
DECODE_ERRORS = (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError)

ARCHIVE_NAME = "enhanced_images.zip"


def _allowed_pattern() -> re.Pattern:
    return re.compile("|".join(re.escape(ext) for ext in settings.ALLOWED_EXTENSIONS))


def check_file_type(filename: str, content_type: str | None) -> None:
    """MIME 타입과 확장자가 모두 허용 목록에 맞아야 한다."""
    pattern = _allowed_pattern()
    ext = os.path.splitext(filename)[1].lower()
    mime_ok = bool(content_type) and content_type.startswith("image/") and bool(
        pattern.search(content_type)
    )
    ext_ok = bool(ext) and ext[1:] in settings.ALLOWED_EXTENSIONS
    if not (mime_ok and ext_ok):
        raise UnsupportedFileType(f"이미지 파일만 업로드할 수 있습니다: {filename}")


# --- Enhance ---


def save_upload(file: UploadFile, uploads: UploadStore) -> UploadedImage:
    original = bare_filename(file.filename or "image")
    try:
        path, size = uploads.save(file.file, original)
    except OSError as e:
        logger.exception(f"Failed to store upload {original}")
        raise StorageError from e
    return UploadedImage(
        original_filename=original,
        stored_path=path,
        size=size,
        content_type=file.content_type or "",
    )


def enhance_upload(
    upload: UploadedImage, params: EnhanceParams | None, results: ResultStore
) -> EnhancedImage:
    """업로드 원본 하나를 기본 파이프라인으로 보정해서 결과 저장소에 쓴다."""
    filename = results.unique_enhanced_name(upload.original_filename)
    output_path = results.path_for(filename)
    try:
        size = pipeline.enhance_file(upload.stored_path, output_path, params)
    except DECODE_ERRORS as e:
        if os.path.exists(output_path):
            os.remove(output_path)
        raise ProcessingFailed(f"보정 실패: {upload.original_filename}") from e

    logger.info(f"Enhanced {upload.original_filename} → {filename} {size[0]}x{size[1]}")
    return EnhancedImage(filename=filename, path=output_path, url=results.url_for(filename))


def enhance_uploads(
    files: list[UploadFile],
    params: EnhanceParams | None = None,
    uploads: UploadStore | None = None,
    results: ResultStore | None = None,
) -> list[ProcessedFile]:
    """업로드 배치를 순차 처리한다.

    파일 형식/개수/크기 검증 실패는 요청 전체를 실패시키고,
    디코딩 실패한 파일은 로그만 남기고 결과 목록에서 빠진다 (부분 성공).
    """
    uploads = uploads or UploadStore()
    results = results or ResultStore()

    if not files:
        raise ValidationFailed("업로드된 파일이 없습니다")
    if len(files) > settings.MAX_FILES:
        raise ValidationFailed(f"한 번에 최대 {settings.MAX_FILES}개까지 업로드할 수 있습니다")
    for file in files:
        check_file_type(file.filename or "", file.content_type)

    logger.info(f"Upload batch: {len(files)} file(s)")

    # 전부 저장한 뒤에 보정한다. 저장 단계에서 실패하면 결과 파일이 하나도 남지 않는다
    saved: list[UploadedImage] = []
    try:
        for file in files:
            saved.append(save_upload(file, uploads))
    except (FileTooLarge, StorageError, ValidationFailed):
        for upload in saved:
            if os.path.exists(upload.stored_path):
                os.remove(upload.stored_path)
        raise

    processed = []
    for upload in saved:
        try:
            enhanced = enhance_upload(upload, params, results)
        except ProcessingFailed as e:
            logger.warning(f"Skipped {upload.original_filename}: {e.__cause__!r}")
            continue
        processed.append(
            ProcessedFile(
                original=upload.original_filename,
                source_filename=os.path.basename(upload.stored_path),
                enhanced=enhanced.filename,
                url=enhanced.url,
            )
        )

    logger.info(f"Upload batch done: {len(processed)}/{len(files)} enhanced")
    return processed


# --- Reprocess ---


def reprocess(
    target_filename: str | None, overlay: str | None, results: ResultStore | None = None
) -> str:
    """오버레이를 기존 보정 결과에 합성하고 캐시 무효화 토큰이 붙은 URL을 반환한다."""
    results = results or ResultStore()
    if not target_filename or not overlay:
        raise ValidationFailed("파일명 또는 오버레이 데이터가 없습니다")

    filename = bare_filename(target_filename)
    if not results.exists(filename):
        raise ImageNotFound(f"대상 파일을 찾을 수 없습니다: {filename}")

    try:
        overlay_bytes = codec.decode_data_url(overlay)
        changed = pipeline.composite_file(results.path_for(filename), overlay_bytes)
    except DECODE_ERRORS as e:
        logger.exception(f"Reprocess failed for {filename}")
        raise ProcessingFailed from e

    logger.info(f"Reprocessed {filename}" + ("" if changed else " (blank overlay, unchanged)"))
    return results.url_for(filename, cache_bust=True)


# --- Rename ---


def resolve_new_name(old_filename: str, new_filename: str) -> str:
    """새 이름의 확장자가 기존 파일과 다르면 기존 확장자를 뒤에 붙인다.

    "kitty" → "kitty.png", "kitty.jpg" → "kitty.jpg.png" (기존이 .png일 때)
    """
    old_ext = os.path.splitext(old_filename)[1]
    if os.path.splitext(new_filename)[1] == old_ext:
        return new_filename
    return new_filename + old_ext


def rename(
    old_filename: str | None, new_filename: str | None, results: ResultStore | None = None
) -> str:
    results = results or ResultStore()
    if not old_filename or not new_filename:
        raise ValidationFailed("파일명이 없습니다")

    safe_old = bare_filename(old_filename)
    final_name = resolve_new_name(safe_old, bare_filename(new_filename))

    if not results.exists(safe_old):
        raise ImageNotFound(f"파일을 찾을 수 없습니다: {safe_old}")
    if os.path.exists(results.path_for(final_name)):
        raise FilenameConflict(f"같은 이름의 파일이 이미 존재합니다: {final_name}")

    try:
        results.rename(safe_old, final_name)
    except OSError as e:
        logger.exception(f"Rename failed {safe_old} → {final_name}")
        raise StorageError("이름 변경에 실패했습니다") from e

    logger.info(f"Renamed {safe_old} → {final_name}")
    return final_name


# --- Bundle ---


def bundle_all(results: ResultStore | None = None) -> bytes:
    """결과 저장소의 모든 파일(.zip 제외)을 하나의 zip으로 묶는다.

    세션/사용자 구분 없이 디렉토리 전체가 대상이다.
    """
    results = results or ResultStore()
    buf = io.BytesIO()
    try:
        names = [n for n in results.list_files() if not n.lower().endswith(".zip")]
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name in names:
                zf.write(results.path_for(name), arcname=name)
    except OSError as e:
        logger.exception("Failed to bundle results directory")
        raise StorageError("결과 디렉토리를 읽을 수 없습니다") from e

    logger.info(f"Bundled {len(names)} file(s)")
    return buf.getvalue()
