"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error_code": "...", "error": "..."} 형식의 JSON 응답을 생성한다.

4xx 계열은 메시지를 그대로 노출하고, 5xx 계열은 로그만 남기고
일반적인 메시지로 응답한다.
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "서버 내부 오류가 발생했습니다"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


# --- 요청 검증 ---


class ValidationFailed(AppException):
    status_code = 400
    error_code = "VALIDATION_ERROR"
    message = "요청 값이 올바르지 않습니다"


class UnsupportedFileType(AppException):
    status_code = 400
    error_code = "UNSUPPORTED_FILE_TYPE"
    message = "이미지 파일만 업로드할 수 있습니다"


class FileTooLarge(AppException):
    status_code = 413
    error_code = "FILE_TOO_LARGE"
    message = "파일 크기가 제한을 초과했습니다"


# --- 파일 관련 ---


class ImageNotFound(AppException):
    status_code = 404
    error_code = "IMAGE_NOT_FOUND"
    message = "이미지를 찾을 수 없습니다"


class FilenameConflict(AppException):
    status_code = 409
    error_code = "FILENAME_CONFLICT"
    message = "같은 이름의 파일이 이미 존재합니다"


# --- 처리/저장 실패 (5xx) ---


class ProcessingFailed(AppException):
    status_code = 500
    error_code = "PROCESSING_FAILED"
    message = "이미지 처리에 실패했습니다"


class StorageError(AppException):
    status_code = 500
    error_code = "STORAGE_ERROR"
    message = "파일 저장소 작업에 실패했습니다"
