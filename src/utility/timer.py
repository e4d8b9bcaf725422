"""처리 시간 측정 유틸리티."""

import time
from contextlib import contextmanager

from loguru import logger


@contextmanager
def timer(label: str = "", level: str = "INFO"):
    """컨텍스트 매니저: 블록 실행 시간을 측정한다.

    사용법:
        with timer("enhance cat.png") as t:
            ...
        print(t.elapsed_ms)

    블록에서 예외가 나도 경과 시간은 기록된다.
    """
    t = _Elapsed()
    start = time.perf_counter()
    try:
        yield t
    finally:
        t.elapsed = time.perf_counter() - start
        if label:
            logger.log(level, f"[{label}] {t.elapsed_ms:.0f}ms")


class _Elapsed:
    elapsed: float = 0.0

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000
