# ==============================================================================
# 목적 : 설정 관련 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

DEFAULT_CONFIG_PATH = Path("config/config.yml")

# 환경 변수 -> 설정 dotted path
ENV_OVERRIDES = {
    "OSS_ACCESS_KEY_ID": "oss.access_key",
    "OSS_ACCESS_KEY_SECRET": "oss.secret_key",
    "OSS_BUCKET": "oss.bucket",
    "OSS_REGION": "oss.region",
    "OSS_ENDPOINT": "oss.endpoint",
    "OSS_BASE_PATH": "oss.base_path",
    "OSS_ORIGINAL_OSS_URL": "oss.source_url",
    "OSS_BASE_URL": "oss.public_url",
}


def load_config(config_path: Path) -> dict:
    """YAML 설정 파일을 로드하여 dict로 반환합니다.

    config_path의 YAML 파일을 PyYAML의 safe_load로 파싱합니다.
    YAML 내용이 비어있거나 파싱 결과가 falsy일 경우 빈 dict를 반환합니다.

    Args:
        config_path: YAML 설정 파일 경로.

    Returns:
        YAML을 dict로 파싱한 결과. 비어있으면 {} 반환.

    Raises:
        FileNotFoundError: config_path가 존재하지 않을 경우.
        yaml.YAMLError: YAML 문법 오류 등으로 파싱에 실패할 경우.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"config not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_value(cfg: dict, path: str, default: Any = None) -> Any:
    """중첩 dict에서 dotted path로 값을 안전하게 조회합니다.

    path를 '.'를 기준으로 분리한 키 시퀀스를 따라가며 중첩 dict 값을 조회합니다.
    탐색 중 현재 값이 dict가 아니거나, 키가 존재하지 않으면 default를 반환합니다.
    """
    cur: Any = cfg
    for key in path.split("."):
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


def set_value(cfg: dict, path: str, value: Any) -> None:
    """dotted path 위치에 값을 기록합니다. 중간 dict가 없으면 생성합니다."""
    cur = cfg
    keys = path.split(".")
    for key in keys[:-1]:
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[key] = nxt
        cur = nxt
    cur[keys[-1]] = value


def apply_env_overrides(cfg: dict, environ: Optional[Mapping[str, str]] = None) -> dict:
    """환경 변수 값으로 설정을 덮어씁니다.

    ENV_OVERRIDES에 정의된 환경 변수 중 값이 비어있지 않은 것만 반영합니다.
    자격 증명처럼 YAML에 두기 곤란한 값을 .env 또는 실행 환경에서 주입하기 위한 용도입니다.

    Args:
        cfg: load_config 결과 dict. 직접 수정됩니다.
        environ: 조회할 환경 변수 매핑. 없으면 os.environ.

    Returns:
        덮어쓰기가 반영된 cfg.
    """
    env = os.environ if environ is None else environ
    for env_name, path in ENV_OVERRIDES.items():
        v = env.get(env_name)
        if v:
            set_value(cfg, path, v)
    return cfg


def load_settings(config_path: Optional[Path] = None) -> dict:
    """YAML 설정과 환경 변수(.env 포함)를 합쳐 최종 설정 dict를 만듭니다.

    config_path가 주어지지 않았고 기본 경로(config/config.yml)도 없으면 빈 설정에서 시작합니다.
    명시적으로 전달한 config_path가 없으면 FileNotFoundError를 그대로 전파합니다.

    Args:
        config_path: YAML 설정 파일 경로.

    Returns:
        환경 변수 덮어쓰기까지 반영된 설정 dict.
    """
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path)
    if config_path is None:
        cfg = load_config(DEFAULT_CONFIG_PATH) if DEFAULT_CONFIG_PATH.exists() else {}
    else:
        cfg = load_config(config_path)
    return apply_env_overrides(cfg)
