# ==============================================================================
# 목적 : 파싱된 파라미터를 작업 제출 스키마로 변환하는 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-03
# AI 활용 여부 :
# ==============================================================================

from typing import Any, Dict, List

from imgbatch.adapters.parsing.params_parser import (
    CONTROLNET_INDEXES,
    ParameterFormatError,
    controlnet_key,
)
from imgbatch.common.normalize import maybe_number, to_number
from imgbatch.domain.models import ItemRecord

TASK_NAME = "make_image_with_webui"
MAX_STEPS = 20

SAMPLER_RENAMES = {"DPM++": "DPM++ SDE Karras"}
BASE_MODEL_RENAMES = {"AnythingV5V3_v5PrtRE": "AnythingV5_v5PrtRE"}
MODULE_RENAMES = {"tile_resample": "none"}


def _require(parsed: Dict[str, Any], key: str) -> Any:
    v = parsed.get(key)
    if v is None or v == "":
        raise ParameterFormatError(f"missing field: {key}")
    return v


def _number(parsed: Dict[str, Any], key: str) -> Any:
    raw = _require(parsed, key)
    try:
        return to_number(raw)
    except ValueError as e:
        raise ParameterFormatError(f"field {key} is not a number: {raw!r}") from e


def _optional_number(unit: Dict[str, Any], key: str) -> Any:
    raw = unit.get(key)
    try:
        return maybe_number(raw)
    except ValueError as e:
        raise ParameterFormatError(f"field {key} is not a number: {raw!r}") from e


def parse_size(size: str) -> List[Any]:
    """"768x512" 형태의 Size 값을 [width, height] 숫자로 분리합니다.

    Raises:
        ParameterFormatError: 'x'로 두 값이 나뉘지 않거나 숫자가 아닌 경우.
    """
    parts = str(size).split("x")
    if len(parts) != 2:
        raise ParameterFormatError(f"invalid Size: {size!r}")
    try:
        return [to_number(parts[0]), to_number(parts[1])]
    except ValueError as e:
        raise ParameterFormatError(f"invalid Size: {size!r}") from e


def to_target_prompts(parsed: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "prompt": parsed.get("prompt", ""),
        "negative": parsed.get("negative", ""),
    }


def build_controlnet_units(parsed: Dict[str, Any], item: ItemRecord) -> List[Dict[str, Any]]:
    """parameters 원문에 "ControlNet {i}"가 있는 번호에 대해 ControlNet unit 목록을 만듭니다.

    preprocessor가 tile_resample이면 module을 "none"으로 바꾸고,
    해당 번호로 업로드된 이미지가 없으면 원본 이미지 URL을 입력으로 사용합니다.

    Args:
        parsed: parse_parameters 결과.
        item: 업로드 URL과 parameters 원문을 가진 아이템.

    Returns:
        controlnet_units 리스트(번호 순).

    Raises:
        ParameterFormatError: 원문에는 블록이 있는데 파싱 결과가 dict가 아닌 경우 등.
    """
    units: List[Dict[str, Any]] = []
    for i in CONTROLNET_INDEXES:
        k = controlnet_key(i)
        if k not in item.output:
            continue
        cn = parsed.get(k)
        if not isinstance(cn, dict):
            raise ParameterFormatError(f"{k} block could not be parsed")

        input_image = item.controlnet.get(i)
        module = cn.get("preprocessor")
        if module in MODULE_RENAMES:
            module = MODULE_RENAMES[module]
            if not input_image:
                input_image = item.original

        unit: Dict[str, Any] = {
            "mask": "",
            "module": module,
            "lowvram": False,
            "resize_mode": cn.get("resize mode"),
            "guidance_start": _optional_number(cn, "starting"),
            "guidance_end": _optional_number(cn, "ending"),
            "model": cn.get("model"),
            "weight": _optional_number(cn, "weight"),
            "control_mode": cn.get("control mode"),
            "pixel_perfect": cn.get("pixel perfect") == "True",
        }
        # 업로드 기록이 없는 번호는 input_image 키 자체를 생략
        if input_image is not None:
            unit["input_image"] = input_image
        units.append(unit)
    return units


def to_target_params(parsed: Dict[str, Any], item: ItemRecord) -> Dict[str, Any]:
    """파싱 결과를 작업 제출(make_image_with_webui) 파라미터로 변환합니다.

    steps는 최대 20으로 제한합니다.
    Sampler "DPM++"는 "DPM++ SDE Karras"로, 일부 base model 이름은 교정된 이름으로 바꿉니다.
    "Hires upscale"이 있으면 hires fix 관련 필드를 추가합니다.

    Args:
        parsed: parse_parameters 결과.
        item: 업로드 URL과 parameters 원문을 가진 아이템.

    Returns:
        작업 제출 파라미터 dict.

    Raises:
        ParameterFormatError: 필수 필드가 없거나 숫자 변환에 실패한 경우.
    """
    width, height = parse_size(_require(parsed, "Size"))
    steps = _number(parsed, "Steps")
    sampler = _require(parsed, "Sampler")
    base_model = _require(parsed, "Model")

    ret: Dict[str, Any] = {
        "extra_jobs": "",
        "task_name": TASK_NAME,
        "steps": MAX_STEPS if steps > MAX_STEPS else steps,
        "sampler_index": SAMPLER_RENAMES.get(sampler, sampler),
        "cfg_scale": _number(parsed, "CFG scale"),
        "width": width,
        "height": height,
        "base_model_name": BASE_MODEL_RENAMES.get(base_model, base_model),
        "controlnet_units": build_controlnet_units(parsed, item),
    }

    if parsed.get("Hires upscale"):
        ret["enable_hr"] = True
        ret["hr_upscaler"] = parsed.get("Hires upscaler")
        ret["hr_scale"] = _number(parsed, "Hires upscale")
        ret["denoising_strength"] = _optional_number(parsed, "Denoising strength")
        ret["hr_second_pass_steps"] = _optional_number(parsed, "Hires steps")

    return ret
