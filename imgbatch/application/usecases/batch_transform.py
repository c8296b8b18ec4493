# ==============================================================================
# 목적 : 생성 이미지 디렉토리를 스캔해 업로드/파라미터 변환/리포트 작성을 실행하는 코드
# 최초 작업자 : (AI솔루션/박태원)
# 최초 작업일 : 2026-02-03
# AI 활용 여부 :
# ==============================================================================

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from tqdm import tqdm

from imgbatch.adapters.parsing.params_parser import ParameterFormatError, parse_parameters
from imgbatch.adapters.parsing.png_metadata import read_parameters
from imgbatch.application.services.report_writer import write_report
from imgbatch.application.services.scan_stage import scan_directory
from imgbatch.application.services.schema_mapper import to_target_params, to_target_prompts
from imgbatch.application.services.validator import validate_item
from imgbatch.common.config import get_value, load_settings
from imgbatch.domain.models import (
    BatchTransformResult,
    FileRef,
    ItemRecord,
    KIND_CONTROLNET,
    KIND_ORIGINAL,
    KIND_OUTPUT,
    TransformOptions,
)
from imgbatch.infra.storage.minio import MinIOWriter, object_store_config_from

_log = logging.getLogger(__name__)


def transform_options_from(cfg: dict) -> TransformOptions:
    return TransformOptions(
        settings_value=str(get_value(cfg, "variant.settings_value", "comma")).strip(),
        size_rule=str(get_value(cfg, "variant.size_rule", "both")).strip(),
    )


def finalize_item(item: ItemRecord, options: TransformOptions) -> None:
    """아이템 하나에 대해 parse -> map -> validate를 실행하고 결과를 item에 기록합니다.

    parameters 형식 오류는 실행 전체를 중단하지 않고 item.errors에 남깁니다.
    파싱에 성공했다면 target_prompts는 채워지고, 변환에 실패한 target_params만 빈 dict로 유지됩니다.
    """
    try:
        item.parsed = parse_parameters(item.output, options=options)
        item.target_prompts = to_target_prompts(item.parsed)
        item.target_params = to_target_params(item.parsed, item)
    except ParameterFormatError as e:
        _log.warning("Invalid parameters. key=%s err=%s", item.key, e)
        item.errors.append(f"invalid parameters: {e}")

    item.errors.extend(validate_item(item, options=options))
    if item.errors:
        _log.warning("error: %s %s", item.key, item.errors)


def batch_transform(
    *,
    config_path: Optional[Path] = None,
    source_dir: Optional[Path] = None,
    uploader: Optional[MinIOWriter] = None,
) -> BatchTransformResult:
    cfg = load_settings(config_path)

    src_dir = source_dir
    if src_dir is None:
        src_name = str(get_value(cfg, "paths.source_dir", "") or "").strip()
        if not src_name:
            raise ValueError("paths.source_dir is required.")
        src_dir = Path(src_name)
    file_ext = str(get_value(cfg, "paths.file_ext", ".png"))
    options = transform_options_from(cfg)

    if uploader is None:
        uploader = MinIOWriter(object_store_config_from(cfg))

    _log.info("Start scan. source_dir=%s ext=%s", src_dir, file_ext)
    scan = scan_directory(src_dir, file_ext)

    items: Dict[str, ItemRecord] = {key: ItemRecord(key=key) for key in scan.items}
    refs: List[FileRef] = [ref for key in scan.items for ref in scan.items[key]]

    uploaded_count = 0
    failed_upload_count = 0
    for ref in tqdm(refs, total=len(refs), desc="UPLOAD + META", unit="file"):
        item = items[ref.key]
        file_path = src_dir / ref.filename

        if ref.kind == KIND_OUTPUT:
            item.output = read_parameters(file_path)
            if not item.output:
                _log.warning("No parameters in output image: %s", ref.filename)
            continue

        url = uploader.upload_file(file_path, ref.filename)
        if url:
            uploaded_count += 1
        else:
            failed_upload_count += 1

        if ref.kind == KIND_ORIGINAL:
            item.original = url
        elif ref.kind == KIND_CONTROLNET:
            item.controlnet[ref.index] = url

    report_paths: List[str] = []
    error_item_count = 0
    for key in sorted(items):
        item = items[key]
        finalize_item(item, options)
        if item.errors:
            error_item_count += 1
        report_paths.append(str(write_report(item, src_dir)))

    _log.info(
        "Done. source_dir=%s files=%d items=%d malformed=%d uploads(ok=%d failed=%d) error_items=%d",
        src_dir, scan.file_count, len(items), len(scan.malformed),
        uploaded_count, failed_upload_count, error_item_count,
    )

    return BatchTransformResult(
        source_dir=str(src_dir),
        file_count=scan.file_count,
        item_count=len(items),
        malformed_files=list(scan.malformed),
        uploaded_count=uploaded_count,
        failed_upload_count=failed_upload_count,
        error_item_count=error_item_count,
        report_paths=report_paths,
    )
