# ==============================================================================
# 목적 : 정규화 관련 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-03
# AI 활용 여부 :
# ==============================================================================

from typing import Any, Optional, Union

from imgbatch.adapters.parsing.regex import RE_INT_STR

Number = Union[int, float]


def to_number(v: Any) -> Number:
    """문자열/숫자 값을 int 또는 float로 정규화합니다.

    bool은 숫자로 취급하지 않습니다.
    이미 int/float이면 그대로 반환합니다.
    문자열은 앞뒤 공백 제거 후 정수 형태("20", "-1")면 int, 그 외("7.5", "1e-3")는 float로 변환합니다.

    Args:
        v: 변환할 값.

    Returns:
        int 또는 float.

    Raises:
        ValueError: 숫자로 해석할 수 없는 경우.
    """
    if isinstance(v, bool):
        raise ValueError(f"not a number: {v!r}")
    if isinstance(v, (int, float)):
        return v
    s = str(v).strip()
    if RE_INT_STR.match(s):
        return int(s)
    return float(s)


def maybe_number(v: Any) -> Optional[Number]:
    """값이 None이면 None, 아니면 to_number 결과를 반환합니다."""
    if v is None:
        return None
    return to_number(v)
