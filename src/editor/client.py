"""HTTP API 클라이언트.

httpx.Client를 감싼 얇은 래퍼. FastAPI의 TestClient도 httpx.Client라서
테스트에서는 그대로 넘겨 쓸 수 있다.
"""

import mimetypes
import os

import httpx
from loguru import logger

from model.image import EnhanceParams, ProcessedFile


class ApiError(Exception):
    """서버가 2xx 외의 응답을 준 경우."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class EnhancerClient:
    def __init__(self, http: httpx.Client):
        self.http = http

    def _check(self, resp: httpx.Response) -> httpx.Response:
        if resp.is_success:
            return resp
        try:
            message = resp.json().get("error", resp.reason_phrase)
        except ValueError:
            message = resp.text or resp.reason_phrase
        logger.warning(f"{resp.request.method} {resp.request.url.path} → {resp.status_code}: {message}")
        raise ApiError(resp.status_code, message)

    # --- 엔드포인트 ---

    def upload(
        self, files: list[tuple[str, bytes, str]], params: EnhanceParams | None = None
    ) -> list[ProcessedFile]:
        """(파일명, 내용, MIME) 목록을 한 번에 업로드한다."""
        multipart = [("files", f) for f in files]
        fields = params.model_dump(exclude_none=True) if params else {}
        data = {k: str(v) for k, v in fields.items()}
        resp = self._check(self.http.post("/upload", files=multipart, data=data))
        return [ProcessedFile(**item) for item in resp.json()["processed_files"]]

    def upload_paths(
        self, paths: list[str], params: EnhanceParams | None = None
    ) -> list[ProcessedFile]:
        files = []
        for path in paths:
            mime = mimetypes.guess_type(path)[0] or "application/octet-stream"
            with open(path, "rb") as f:
                files.append((os.path.basename(path), f.read(), mime))
        return self.upload(files, params)

    def reprocess(self, target_filename: str, overlay: str) -> str:
        resp = self._check(
            self.http.post(
                "/reprocess", json={"targetFilename": target_filename, "overlay": overlay}
            )
        )
        return resp.json()["url"]

    def rename(self, old_filename: str, new_filename: str) -> tuple[str, str]:
        """(최종 파일명, URL)을 반환한다. 확장자는 서버가 원래 것으로 맞춘다."""
        resp = self._check(
            self.http.post(
                "/rename", json={"oldFilename": old_filename, "newFilename": new_filename}
            )
        )
        body = resp.json()
        return body["newFilename"], body["url"]

    def download_all(self) -> bytes:
        return self._check(self.http.get("/download_all")).content

    def fetch_image(self, url: str) -> bytes:
        return self._check(self.http.get(url)).content
