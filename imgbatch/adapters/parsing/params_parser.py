# ==============================================================================
# 목적 : 생성 파라미터(parameters) 텍스트 파싱 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

from typing import Any, Dict, List, Optional

from imgbatch.adapters.parsing.regex import (
    RE_NUMBER,
    RE_SETTING_COMMA,
    RE_SETTING_WHITESPACE,
    RE_UNIT_FIELD,
)
from imgbatch.domain.models import TransformOptions

CONTROLNET_INDEXES = (0, 1, 2, 3, 4)
STARTING_ENDING_KEY = "starting/ending"


class ParameterFormatError(ValueError):
    """parameters 텍스트가 기대하는 형식(3줄 + key: value)이 아닐 때 발생합니다."""


def controlnet_key(index: int) -> str:
    return f"ControlNet {index}"


def split_settings(line: str, value_mode: str = "comma") -> Dict[str, str]:
    """settings 줄("Steps: 20, Sampler: Euler a, ...")을 key/value dict로 분리합니다.

    왼쪽부터 "key: value"를 순서대로 매칭합니다.
    값은 따옴표 문자열이면 따옴표 안의 콤마를 포함해 통째로 취합니다.
    따옴표는 제거하고, 끝에 남은 콤마 하나를 제거합니다.
    같은 key가 여러 번 나오면 마지막 값이 남습니다.

    Args:
        line: parameters의 세 번째 줄.
        value_mode: "comma"면 콤마 전까지, "whitespace"면 공백 전까지를 값으로 봅니다.

    Returns:
        key -> 문자열 값 dict(등장 순서 유지).
    """
    pattern = RE_SETTING_WHITESPACE if value_mode == "whitespace" else RE_SETTING_COMMA
    out: Dict[str, str] = {}
    for m in pattern.finditer(line):
        value = m.group(2).strip().replace('"', "")
        if value.endswith(","):
            value = value[:-1]
        out[m.group(1)] = value
    return out


def split_unit(text: str) -> Dict[str, Any]:
    """ControlNet 블록 문자열을 key/value dict로 분리합니다.

    "(0, 1)"이나 "[a, b]"처럼 괄호로 묶인 구간의 콤마에서는 자르지 않습니다.
    starting/ending 값이 있으면 숫자를 순서대로 찾아 앞의 두 개를 starting, ending(float)으로 추가합니다.

    Args:
        text: "preprocessor: canny, model: ..., starting/ending: (0, 1), ..." 형태의 문자열.

    Returns:
        key -> 값 dict. starting/ending은 float.
    """
    unit: Dict[str, Any] = {}
    for m in RE_UNIT_FIELD.finditer(text):
        unit[m.group(1)] = m.group(2)

    span = unit.get(STARTING_ENDING_KEY)
    if span:
        numbers = [float(x) for x in RE_NUMBER.findall(span)]
        if len(numbers) > 0:
            unit["starting"] = numbers[0]
        if len(numbers) > 1:
            unit["ending"] = numbers[1]
    return unit


def _content_lines(text: str) -> List[str]:
    return [s for s in text.splitlines() if s.strip() != ""]


def parse_parameters(text: str, *, options: Optional[TransformOptions] = None) -> Dict[str, Any]:
    """parameters 원문을 prompt/negative/settings dict로 파싱합니다.

    빈 줄을 제외한 첫 줄은 prompt, 둘째 줄은 첫 ':' 뒤의 negative prompt,
    셋째 줄은 settings로 봅니다. settings 중 "ControlNet 0" ~ "ControlNet 4"는
    split_unit으로 한 번 더 분리해 중첩 dict로 교체합니다.

    Args:
        text: 이미지에서 읽은 parameters 원문.
        options: settings 값 토큰 규칙 등 variant 옵션.

    Returns:
        {"prompt", "negative", <settings key>...} dict.

    Raises:
        ParameterFormatError: 줄 수가 3 미만이거나 negative 줄에 ':'가 없는 경우.
    """
    opts = options or TransformOptions()
    lines = _content_lines(text)
    if len(lines) < 3:
        raise ParameterFormatError(f"parameters need 3 lines (prompt, negative, settings). got={len(lines)}")

    head, sep, negative = lines[1].partition(":")
    if not sep:
        raise ParameterFormatError(f"negative prompt line has no ':': {head[:40]!r}")

    parsed: Dict[str, Any] = {
        "prompt": lines[0],
        "negative": negative.strip(),
    }

    args: Dict[str, Any] = dict(split_settings(lines[2], opts.settings_value))
    for i in CONTROLNET_INDEXES:
        k = controlnet_key(i)
        if not args.get(k):
            continue
        args[k] = split_unit(args[k])

    parsed.update(args)
    return parsed
