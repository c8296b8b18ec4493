# ==============================================================================
# 목적 : 디렉토리 스캔 관련 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from imgbatch.common.ids import item_key_of, split_filename
from imgbatch.domain.models import FileRef, FILE_KINDS, KIND_CONTROLNET

_log = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """디렉토리 스캔 결과.

    Attributes:
        items: 아이템 식별자 -> 해당 아이템에 속한 파일 목록(파일명 순).
        malformed: 파일명 규칙 위반으로 아이템을 무효화한 파일명.
        file_count: 확장자가 일치한 파일 수.
    """
    items: Dict[str, List[FileRef]] = field(default_factory=dict)
    malformed: List[str] = field(default_factory=list)
    file_count: int = 0


def classify_filename(filename: str) -> Optional[FileRef]:
    """파일명을 FileRef로 분류합니다.

    "<a>_<b>_<kind>[_<index>].<ext>" 규칙을 따르지 않으면 None을 반환합니다.
    kind는 original/output/controlnet 중 하나여야 하고,
    controlnet은 4번째 조각이 정수 번호여야 합니다.

    Args:
        filename: 디렉토리 경로를 제외한 파일명.

    Returns:
        FileRef 또는 규칙 위반 시 None.
    """
    parts = split_filename(filename)
    if len(parts) < 3:
        return None
    kind = parts[2]
    if kind not in FILE_KINDS:
        return None

    key = item_key_of(parts[0], parts[1])
    if kind != KIND_CONTROLNET:
        return FileRef(filename=filename, key=key, kind=kind)

    if len(parts) < 4 or not parts[3].isdigit():
        return None
    return FileRef(filename=filename, key=key, kind=kind, index=int(parts[3]))


def scan_directory(source_dir: Path, file_ext: str) -> ScanResult:
    """디렉토리의 파일을 아이템 단위로 묶습니다.

    파일명 순으로 정렬한 뒤 file_ext로 끝나는 파일만 처리합니다.
    규칙을 벗어난 파일명이 하나라도 있으면 같은 식별자의 아이템 전체를 버리고,
    이후 같은 식별자의 파일도 무시합니다. 이 경우는 경고 로그만 남기고 계속 진행합니다.

    Args:
        source_dir: 스캔할 디렉토리.
        file_ext: 처리할 파일 확장자(예: ".png").

    Returns:
        ScanResult.

    Raises:
        OSError: 디렉토리를 읽을 수 없는 경우.
    """
    result = ScanResult()
    dropped: Set[str] = set()

    for name in sorted(p.name for p in source_dir.iterdir()):
        if not name.endswith(file_ext):
            continue
        result.file_count += 1

        ref = classify_filename(name)
        if ref is None:
            parts = split_filename(name)
            bad_key = item_key_of(parts[0], parts[1]) if len(parts) >= 2 else name
            dropped.add(bad_key)
            result.items.pop(bad_key, None)
            result.malformed.append(name)
            _log.warning("wrong filename: %s", name)
            continue

        if ref.key in dropped:
            _log.debug("Skip file of dropped item: %s", name)
            continue
        result.items.setdefault(ref.key, []).append(ref)

    return result
