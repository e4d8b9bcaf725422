from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "photo-enhancer"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "DEBUG"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # 파일 저장 경로 (DB 없음, 디렉토리 = 저장소)
    UPLOAD_DIR: str = "./public/uploads"
    RESULTS_DIR: str = "./public/results"

    # 업로드 제한
    MAX_FILES: int = 50
    MAX_FILE_SIZE: int = 50 * 1024 * 1024  # 50MB
    ALLOWED_EXTENSIONS: tuple[str, ...] = ("jpeg", "jpg", "png", "webp", "tiff", "bmp")

    # 기본 보정 파이프라인: 2배 업스케일 (가로 최대 4000px) → 샤프닝
    UPSCALE_FACTOR: int = 2
    MAX_WIDTH: int = 4000
    SHARPEN_SIGMA: float = 1.5
    SHARPEN_PERCENT: int = 150
    SHARPEN_THRESHOLD: int = 3

    # 저장 품질
    JPEG_QUALITY: int = 95

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
