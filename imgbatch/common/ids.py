# ==============================================================================
# 목적 : ID 관련 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

from typing import List

from imgbatch.adapters.parsing.regex import RE_FILENAME_SEP


def split_filename(filename: str) -> List[str]:
    """파일명을 '.'과 '_' 기준으로 분리합니다.

    확장자를 포함한 전체 파일명을 그대로 분리하므로 마지막 요소는 보통 확장자입니다.
    빈 문자열 조각은 제거하지 않습니다.

    Args:
        filename: 디렉토리 경로를 제외한 파일명.

    Returns:
        분리된 파일명 조각 리스트.
    """
    return RE_FILENAME_SEP.split(filename)


def item_key_of(first: str, second: str) -> str:
    """파일명 앞 두 조각으로 아이템 식별자를 생성합니다.

    포맷은 "{first}_{second}"로 고정되며, 리포트 파일명(<key>.txt)으로도 사용됩니다.

    Args:
        first: 파일명 첫 번째 조각.
        second: 파일명 두 번째 조각.

    Returns:
        아이템 식별자 문자열.
    """
    return f"{first}_{second}"
