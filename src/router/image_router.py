from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import Response

from model.image import (
    EnhanceParams,
    RenameRequest,
    RenameResponse,
    ReprocessRequest,
    ReprocessResponse,
    UploadResponse,
)
from service import image_service
from service.store import ResultStore

router = APIRouter(tags=["images"])


@router.post("/upload", response_model=UploadResponse)
def upload_images(
    files: list[UploadFile] = File(...),
    sharpen: float | None = Form(default=None, gt=0),
    brightness: float | None = Form(default=None, ge=0),
    saturation: float | None = Form(default=None, ge=0),
):
    """여러 장을 받아 순차로 보정한다. 디코딩 실패한 파일은 결과에서 빠진다."""
    params = EnhanceParams(sharpen=sharpen, brightness=brightness, saturation=saturation)
    processed = image_service.enhance_uploads(files, params)
    return UploadResponse(processed_files=processed)


@router.post("/reprocess", response_model=ReprocessResponse)
def reprocess_image(req: ReprocessRequest):
    """브러시 오버레이(base64 data URL)를 기존 결과 이미지에 합성한다."""
    url = image_service.reprocess(req.target_filename, req.overlay)
    return ReprocessResponse(url=url)


@router.post("/rename", response_model=RenameResponse)
def rename_image(req: RenameRequest):
    new_name = image_service.rename(req.old_filename, req.new_filename)
    return RenameResponse(
        new_filename=new_name,
        url=ResultStore().url_for(new_name),
    )


@router.get("/download_all")
def download_all():
    data = image_service.bundle_all()
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f"attachment; filename={image_service.ARCHIVE_NAME}"},
    )
