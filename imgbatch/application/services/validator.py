# ==============================================================================
# 목적 : 아이템 검증 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-03
# AI 활용 여부 :
# ==============================================================================

from typing import List, Optional

from imgbatch.domain.models import ItemRecord, TransformOptions

MAX_SIZE = 512


def check_controlnet_markers(item: ItemRecord) -> List[str]:
    errors: List[str] = []
    for i in sorted(item.controlnet):
        if f"ControlNet-{i}" not in item.output:
            errors.append(f"not found ControlNet-{i} in the parameters")
    return errors


def check_size(item: ItemRecord, size_rule: str = "both") -> List[str]:
    """target width/height가 MAX_SIZE를 넘는지 확인합니다.

    size_rule이 "both"면 둘 다 초과일 때, "either"면 하나라도 초과일 때 오류 메시지 하나를 반환합니다.
    target_params에 width/height가 없으면 검사하지 않습니다.
    """
    width = item.target_params.get("width")
    height = item.target_params.get("height")
    if width is None or height is None:
        return []

    if size_rule == "either":
        oversize = width > MAX_SIZE or height > MAX_SIZE
    else:
        oversize = width > MAX_SIZE and height > MAX_SIZE
    if oversize:
        return [f"the width and height are larger than {MAX_SIZE}"]
    return []


def validate_item(item: ItemRecord, *, options: Optional[TransformOptions] = None) -> List[str]:
    """아이템의 ControlNet 표기와 이미지 크기를 검증해 오류 메시지 목록을 반환합니다.

    결과는 권고용입니다. 업로드나 리포트 작성을 막지 않습니다.

    Args:
        item: target_params까지 채워진 아이템.
        options: size_rule 등 variant 옵션.

    Returns:
        오류 메시지 리스트. 문제가 없으면 [].
    """
    opts = options or TransformOptions()
    return check_controlnet_markers(item) + check_size(item, opts.size_rule)
