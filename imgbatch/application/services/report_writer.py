# ==============================================================================
# 목적 : 아이템별 리포트(<key>.txt) 작성 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-03
# AI 활용 여부 :
# ==============================================================================

import json
from pathlib import Path

from imgbatch.domain.models import ItemRecord


def build_parameters_text(item: ItemRecord) -> str:
    """parameters 원문 뒤에 업로드된 ControlNet 이미지 줄을 번호 순으로 덧붙입니다.

    줄 포맷: ",\\nControlNet-{i} Image: {url}"
    """
    ret = item.output
    for i in sorted(item.controlnet):
        ret += f",\nControlNet-{i} Image: {item.controlnet[i]}"
    return ret


def render_report(item: ItemRecord) -> str:
    """리포트 본문을 생성합니다.

    블록 순서는 오류, 원본 URL, parameters, target prompts(JSON), target params(JSON)이며
    빈 줄 하나("\\n\\n")로 구분합니다.
    """
    blocks = [
        "errors: " + "\n".join(item.errors),
        item.original,
        build_parameters_text(item),
        json.dumps(item.target_prompts, ensure_ascii=False, indent=2),
        json.dumps(item.target_params, ensure_ascii=False, indent=2),
    ]
    return "\n\n".join(blocks)


def write_report(item: ItemRecord, out_dir: Path) -> Path:
    """리포트를 out_dir/<key>.txt 로 저장하고 경로를 반환합니다.

    Raises:
        OSError: 파일 쓰기에 실패한 경우.
    """
    report_path = out_dir / f"{item.key}.txt"
    report_path.write_text(render_report(item), encoding="utf-8")
    return report_path
