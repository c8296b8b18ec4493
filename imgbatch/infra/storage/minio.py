# ==============================================================================
# 목적 : MinIO(S3 호환) 업로드 유틸
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-02
# AI 활용 여부 :
# ==============================================================================

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote

from minio import Minio

from imgbatch.common.config import get_value

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectStoreConfig:
    """Object Storage(S3 호환, Aliyun OSS 포함) 접근 설정 클래스.
    MinIO Python SDK(Minio 클라이언트) 초기화에 필요한 접속 정보와 업로드 경로/URL 치환 규칙을 보관합니다.

    Attributes:
        endpoint: S3 호환 endpoint(host[:port]).
        access_key: 액세스 키.
        secret_key: 비밀번호 키.
        bucket: 업로드 대상 버킷명.
        region: 리전(예: oss-cn-hangzhou).
        base_path: object key 앞에 붙는 prefix.
        source_url: 업로드 결과 URL에서 치환할 prefix.
        public_url: source_url 대신 넣을 공개 URL prefix.
        secure: HTTPS 사용 여부.
    """
    endpoint: str
    access_key: str
    secret_key: str
    bucket: str
    region: str = ""
    base_path: str = ""
    source_url: str = ""
    public_url: str = ""
    secure: bool = True


def object_store_config_from(cfg: dict) -> ObjectStoreConfig:
    """설정 dict의 oss.* 값으로 ObjectStoreConfig를 생성합니다.

    endpoint가 없고 region만 있으면 "<region>.aliyuncs.com"을 사용합니다.

    Raises:
        ValueError: endpoint/bucket을 결정할 수 없는 경우.
    """
    region = str(get_value(cfg, "oss.region", "") or "")
    endpoint = str(get_value(cfg, "oss.endpoint", "") or "")
    if not endpoint and region:
        endpoint = f"{region}.aliyuncs.com"

    store_cfg = ObjectStoreConfig(
        endpoint=endpoint,
        access_key=str(get_value(cfg, "oss.access_key", "") or ""),
        secret_key=str(get_value(cfg, "oss.secret_key", "") or ""),
        bucket=str(get_value(cfg, "oss.bucket", "") or ""),
        region=region,
        base_path=str(get_value(cfg, "oss.base_path", "") or ""),
        source_url=str(get_value(cfg, "oss.source_url", "") or ""),
        public_url=str(get_value(cfg, "oss.public_url", "") or ""),
        secure=bool(get_value(cfg, "oss.secure", True)),
    )
    if not store_cfg.endpoint or not store_cfg.bucket:
        raise ValueError("oss.endpoint(or oss.region)/oss.bucket is required.")
    return store_cfg


def rewrite_url(url: str, source_url: str, public_url: str) -> str:
    """URL 안의 source_url을 public_url로 치환합니다.

    URL 파싱 없이 문자열 그대로 첫 번째 일치만 치환합니다. source_url이 비어있으면 원본을 반환합니다.
    """
    if not source_url:
        return url
    return url.replace(source_url, public_url, 1)


class MinIOWriter:
    """Object Storage에 이미지를 업로드하고 공개 URL을 반환하는 Writer 클래스.

    build_object_key(): base_path 규칙에 따른 object key 생성.
    build_object_url(): 버킷 virtual-host 형식 object URL 생성.
    upload_file(): 파일을 한 번 업로드하고 치환된 URL 반환(실패 시 "").
    """
    def __init__(self, cfg: ObjectStoreConfig, client: Optional[Any] = None):
        """Writer를 초기화합니다.

        Args:
            cfg: ObjectStoreConfig 설정 객체.
            client: put 계열 메서드를 가진 클라이언트. 없으면 Minio 클라이언트를 생성합니다.
        """
        self._cfg = cfg
        self._client = client or Minio(
            endpoint=cfg.endpoint,
            access_key=cfg.access_key,
            secret_key=cfg.secret_key,
            secure=cfg.secure,
            region=cfg.region or None,
        )

    def build_object_key(self, filename: str) -> str:
        """업로드 object key를 생성합니다.

        키 포맷: {base_path}{filename}
        base_path는 구분자를 보정하지 않고 그대로 이어 붙입니다.
        """
        return f"{self._cfg.base_path}{filename}"

    def build_object_url(self, object_key: str) -> str:
        """object key의 접근 URL을 생성합니다.

        URL 포맷: {scheme}://{bucket}.{endpoint}/{object_key}
        key는 '/'를 유지한 채 percent-encoding 합니다.
        """
        scheme = "https" if self._cfg.secure else "http"
        return f"{scheme}://{self._cfg.bucket}.{self._cfg.endpoint}/{quote(object_key, safe='/')}"

    def upload_file(self, file_path: Path, filename: Optional[str] = None) -> str:
        """로컬 파일을 업로드하고 공개 URL을 반환합니다.

        fput_object로 한 번만 업로드합니다(재시도 없음).
        업로드 결과 URL은 rewrite_url로 source_url -> public_url 치환 후 반환합니다.
        실패하면 에러 로그를 남기고 ""를 반환합니다.

        Args:
            file_path: 업로드할 로컬 파일 경로.
            filename: object key에 사용할 파일명. 없으면 file_path의 파일명.

        Returns:
            치환된 object URL 또는 실패 시 "".
        """
        name = filename or file_path.name
        object_key = self.build_object_key(name)
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        try:
            self._client.fput_object(
                bucket_name=self._cfg.bucket,
                object_name=object_key,
                file_path=str(file_path),
                content_type=content_type,
            )
        except Exception as e:
            _log.error("Upload failed. file=%s key=%s err=%s", name, object_key, e)
            return ""

        _log.info("%s uploaded to OSS successfully.", name)
        url = self.build_object_url(object_key)
        return rewrite_url(url, self._cfg.source_url, self._cfg.public_url)
