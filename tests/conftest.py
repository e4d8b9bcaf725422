"""pytest 공용 fixture.

모든 API 테스트는 임시 디렉토리를 업로드/결과 저장소로 사용하여 격리된다.
- 설정(core.config.settings)이 import 시점에 환경변수를 읽으므로
  app을 import 하기 전에 UPLOAD_DIR / RESULTS_DIR을 지정한다.
- 테스트마다 두 디렉토리를 비운다.
"""

import io
import os
import shutil
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

_WORKSPACE = Path(tempfile.mkdtemp(prefix="photo-enhancer-tests-"))
os.environ["UPLOAD_DIR"] = str(_WORKSPACE / "uploads")
os.environ["RESULTS_DIR"] = str(_WORKSPACE / "results")
os.environ["LOG_LEVEL"] = "WARNING"

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from core.config import settings
from main import app


@pytest.fixture(autouse=True)
def clean_store():
    """테스트마다 빈 업로드/결과 디렉토리로 시작한다."""
    for directory in (settings.UPLOAD_DIR, settings.RESULTS_DIR):
        shutil.rmtree(directory, ignore_errors=True)
        os.makedirs(directory)
    yield


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def results_dir() -> Path:
    return Path(settings.RESULTS_DIR)


def make_image_bytes(
    width: int = 100, height: int = 100, fmt: str = "PNG", color="blue", mode: str = "RGB"
) -> bytes:
    """테스트용 이미지를 메모리에서 만들어 인코딩된 bytes로 반환한다."""
    buf = io.BytesIO()
    Image.new(mode, (width, height), color=color).save(buf, format=fmt)
    return buf.getvalue()
