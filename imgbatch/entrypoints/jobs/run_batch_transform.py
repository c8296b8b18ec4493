# ==============================================================================
# 목적 : 생성 이미지 배치 변환(업로드/파라미터 변환/리포트)을 실행하는 코드
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-03
# AI 활용 여부 :
# ==============================================================================

from __future__ import annotations

import json, logging
from pathlib import Path

from imgbatch.application.usecases.batch_transform import batch_transform

_log = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def main() -> int:
    setup_logging()

    config_path = Path("config/config.yml")

    try:
        result = batch_transform(config_path=config_path if config_path.exists() else None)
    except Exception:
        _log.exception("Workflow failed")
        return 1

    payload = result.to_dict()
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    _log.info("Done. source_dir=%s items=%s reports=%s error_items=%s",
              payload.get("source_dir"), payload.get("item_count"),
              len(payload.get("report_paths") or []), payload.get("error_item_count"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
