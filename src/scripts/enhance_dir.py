"""
디렉토리 단위 일괄 보정 스크립트 (서버 없이 파이프라인만 실행).

사용법:
    cd src && python -m scripts.enhance_dir <입력 디렉토리> [출력 디렉토리]

출력 디렉토리를 생략하면 설정의 RESULTS_DIR에 저장한다.
파일명 규칙은 업로드와 같다: enhanced_<base>_<timestamp>.<ext>
"""

import os
import sys
import time

from core.config import settings
from processor.pipeline import enhance_file
from service.image_service import DECODE_ERRORS
from service.store import ResultStore


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    input_dir = sys.argv[1]
    output_dir = sys.argv[2] if len(sys.argv) > 2 else settings.RESULTS_DIR
    os.makedirs(output_dir, exist_ok=True)

    exts = tuple(f".{ext}" for ext in settings.ALLOWED_EXTENSIONS)
    images = [f for f in sorted(os.listdir(input_dir)) if f.lower().endswith(exts)]

    if not images:
        print(f"No images found in {input_dir}")
        sys.exit(1)

    store = ResultStore(output_dir)
    done = 0

    for fname in images:
        out_name = store.unique_enhanced_name(fname)
        start = time.perf_counter()
        try:
            width, height = enhance_file(os.path.join(input_dir, fname), store.path_for(out_name))
        except DECODE_ERRORS as e:
            print(f"  {fname:30s} -> skipped ({e})")
            continue
        elapsed = time.perf_counter() - start
        print(f"  {fname:30s} -> {out_name} {width}x{height}  {elapsed * 1000:6.1f}ms")
        done += 1

    print()
    print(f"Done: {done}/{len(images)} files saved to {output_dir}")


if __name__ == "__main__":
    main()
