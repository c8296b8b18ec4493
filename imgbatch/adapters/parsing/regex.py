# ==============================================================================
# 목적 : 정규식 관련 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

import re

RE_FILENAME_SEP = re.compile(r"[._]")

# 3번째 줄(settings) "key: value" 토큰. value는 따옴표 문자열 또는 콤마/공백 전까지.
RE_SETTING_COMMA = re.compile(r'(\w+\s?[\d\w]+): ("[^"]*"|[^,]+)')
RE_SETTING_WHITESPACE = re.compile(r'(\w+\s?[\d\w]+): ("[^"]*"|\S+)')

# ControlNet 블록 내부 토큰. (..) / [..] 안의 콤마로는 분리하지 않음.
RE_UNIT_FIELD = re.compile(r"(\w+[ /]?\w+): ((?:\([^)]*\)|\[[^\]]*\]|[^,])+)(?:, )?")

RE_NUMBER = re.compile(r"\d+\.?\d*")
RE_INT_STR = re.compile(r"^[+-]?\d+$")
