# ==============================================================================
# 목적 : 생성 이미지 메타데이터(parameters) 추출 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

from pathlib import Path
from typing import Any

from PIL import Image

PARAMETERS_KEY = "parameters"
EXIF_IFD_POINTER = 0x8769
EXIF_USER_COMMENT = 0x9286


def decode_user_comment(raw: Any) -> str:
    """EXIF UserComment 값을 문자열로 디코딩합니다.

    8바이트 문자셋 prefix(UNICODE/ASCII)를 해석합니다.
    UNICODE는 BOM이 없으면 big-endian UTF-16으로 간주합니다.

    Args:
        raw: getexif()에서 읽은 UserComment 값(bytes 또는 str).

    Returns:
        디코딩된 문자열. 해석할 수 없으면 "".
    """
    if isinstance(raw, str):
        return raw.strip("\x00")
    if not isinstance(raw, (bytes, bytearray)):
        return ""
    prefix, body = bytes(raw[:8]), bytes(raw[8:])
    if prefix == b"UNICODE\x00":
        if body[:2] == b"\xff\xfe":
            text = body[2:].decode("utf-16-le", errors="replace")
        elif body[:2] == b"\xfe\xff":
            text = body[2:].decode("utf-16-be", errors="replace")
        else:
            text = body.decode("utf-16-be", errors="replace")
    elif prefix == b"ASCII\x00\x00\x00":
        text = body.decode("ascii", errors="replace")
    else:
        text = bytes(raw).decode("utf-8", errors="replace")
    return text.strip("\x00")


def read_parameters(image_path: Path) -> str:
    """이미지에 기록된 생성 파라미터(parameters) 텍스트를 읽습니다.

    PNG text chunk(tEXt/iTXt, 이미지 데이터 뒤에 있는 chunk 포함)의 "parameters"를 먼저 확인하고,
    없으면 EXIF UserComment(JPEG/WebP 출력)를 확인합니다.
    둘 다 없으면 ""를 반환합니다.

    Args:
        image_path: 이미지 파일 경로.

    Returns:
        여러 줄의 parameters 원문 또는 "".

    Raises:
        OSError: 파일을 열 수 없는 경우.
        PIL.UnidentifiedImageError: 이미지로 인식할 수 없는 경우.
    """
    with Image.open(image_path) as im:
        # PngImageFile.text는 IDAT 뒤의 text chunk까지 읽음. info는 IDAT 앞만 포함
        chunks = getattr(im, "text", None)
        value = chunks.get(PARAMETERS_KEY) if chunks is not None else None
        if not value:
            value = im.info.get(PARAMETERS_KEY)
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="replace")
        if value:
            return str(value)

        exif = im.getexif()
        raw = exif.get_ifd(EXIF_IFD_POINTER).get(EXIF_USER_COMMENT)
        if raw is None:
            return ""
        return decode_user_comment(raw)
