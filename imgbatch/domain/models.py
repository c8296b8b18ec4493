# ==============================================================================
# 목적 : 프로젝트에서 사용하는 모델 관련 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

KIND_ORIGINAL = "original"
KIND_OUTPUT = "output"
KIND_CONTROLNET = "controlnet"
FILE_KINDS = (KIND_ORIGINAL, KIND_OUTPUT, KIND_CONTROLNET)

SETTINGS_VALUE_MODES = ("comma", "whitespace")
SIZE_RULES = ("both", "either")


@dataclass(frozen=True)
class FileRef:
    """파일명 규칙(<a>_<b>_<kind>[_<index>].<ext>)으로 분류된 파일 하나.

    Attributes:
        filename: 디렉토리 경로를 제외한 파일명.
        key: 아이템 식별자("<a>_<b>").
        kind: "original" | "output" | "controlnet".
        index: controlnet 이미지 번호. 그 외 kind는 None.
    """
    filename: str
    key: str
    kind: str
    index: Optional[int] = None


@dataclass
class ItemRecord:
    """생성 이미지 한 건(원본 이미지 + 파라미터 + ControlNet 이미지들)의 처리 상태.

    스캔 중 생성되어 파일 처리 단계에서 채워지고, 마지막에 parse/map/validate/write가 한 번 실행됩니다.

    Attributes:
        key: 아이템 식별자.
        original: 업로드된 원본 이미지 URL. 없거나 업로드 실패 시 "".
        output: 출력 이미지에서 읽은 parameters 원문. 없으면 "".
        controlnet: ControlNet 번호 -> 업로드된 이미지 URL.
        parsed: parameters 원문을 파싱한 dict.
        target_prompts: {prompt, negative}.
        target_params: 작업 제출용 파라미터 dict.
        errors: 검증/파싱 오류 메시지 리스트.
    """
    key: str
    original: str = ""
    output: str = ""
    controlnet: Dict[int, str] = field(default_factory=dict)
    parsed: Dict[str, Any] = field(default_factory=dict)
    target_prompts: Dict[str, Any] = field(default_factory=dict)
    target_params: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class TransformOptions:
    """스크립트 변형(variant)별 차이를 선택하는 옵션.

    Attributes:
        settings_value: settings 줄의 값 토큰 규칙.
            "comma"면 콤마 전까지, "whitespace"면 공백 전까지를 값으로 봅니다.
        size_rule: 크기 검증 규칙.
            "both"면 width/height 모두 512 초과일 때, "either"면 하나라도 초과일 때 오류.
    """
    settings_value: str = "comma"
    size_rule: str = "both"

    def __post_init__(self) -> None:
        if self.settings_value not in SETTINGS_VALUE_MODES:
            raise ValueError(f"Invalid settings_value: {self.settings_value}. use one of {SETTINGS_VALUE_MODES}")
        if self.size_rule not in SIZE_RULES:
            raise ValueError(f"Invalid size_rule: {self.size_rule}. use one of {SIZE_RULES}")


@dataclass(frozen=True)
class BatchTransformResult:
    """배치 변환 파이프라인의 최종 산출물 DTO 클래스.

    Attributes:
        source_dir: 스캔한 이미지 디렉토리.
        file_count: 확장자가 일치한 파일 수.
        item_count: 리포트 대상 아이템 수.
        malformed_files: 파일명 규칙 위반으로 버려진 파일명.
        uploaded_count: 업로드 성공 수.
        failed_upload_count: 업로드 실패 수.
        error_item_count: 오류 메시지가 1개 이상인 아이템 수.
        report_paths: 작성된 리포트 파일 경로.
    """
    source_dir: str
    file_count: int
    item_count: int
    malformed_files: List[str]
    uploaded_count: int
    failed_upload_count: int
    error_item_count: int
    report_paths: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
