import json

import pytest

from imgbatch.application.usecases.batch_transform import batch_transform, finalize_item
from imgbatch.domain.models import ItemRecord, TransformOptions


def _write_config(dir_path, source_dir, extra=""):
    path = dir_path / "config.yml"
    path.write_text(f"paths:\n  source_dir: {source_dir}\n  file_ext: .png\n{extra}", encoding="utf-8")
    return path


@pytest.fixture
def image_dir(clean_env, sample_parameters, write_png):
    src = clean_env / "images"
    src.mkdir()
    (src / "a_001_original.png").write_bytes(b"orig")
    write_png(src / "a_001_output.png", sample_parameters)
    (src / "a_001_controlnet_0.png").write_bytes(b"cn0")
    (src / "b_002_original.png").write_bytes(b"orig")
    (src / "b_002_weird.png").write_bytes(b"???")
    (src / "c_003_original.png").write_bytes(b"orig")
    (src / "readme.txt").write_text("skip me", encoding="utf-8")
    return src


def test_batch_transform_writes_reports(image_dir, clean_env, fake_uploader):
    uploader = fake_uploader()
    result = batch_transform(config_path=_write_config(clean_env, image_dir), uploader=uploader)

    assert result.item_count == 2
    assert result.file_count == 6
    assert result.malformed_files == ["b_002_weird.png"]
    assert result.uploaded_count == 3
    assert result.failed_upload_count == 0
    assert sorted(uploader.calls) == ["a_001_controlnet_0.png", "a_001_original.png", "c_003_original.png"]
    assert result.report_paths == [str(image_dir / "a_001.txt"), str(image_dir / "c_003.txt")]
    assert not (image_dir / "b_002.txt").exists()

    blocks = (image_dir / "a_001.txt").read_text(encoding="utf-8").split("\n\n")
    assert blocks[0] == "errors: not found ControlNet-0 in the parameters"
    assert blocks[1] == "https://cdn.example.com/a_001_original.png"
    assert blocks[2].endswith(",\nControlNet-0 Image: https://cdn.example.com/a_001_controlnet_0.png")
    assert json.loads(blocks[3]) == {"prompt": "masterpiece, 1girl, smile", "negative": "lowres, bad anatomy"}

    params = json.loads(blocks[4])
    assert params["steps"] == 20
    assert params["width"] == 768
    unit = params["controlnet_units"][0]
    assert unit["module"] == "none"
    assert unit["input_image"] == "https://cdn.example.com/a_001_controlnet_0.png"


def test_item_without_output_image_gets_error_report(image_dir, clean_env, fake_uploader):
    batch_transform(config_path=_write_config(clean_env, image_dir), uploader=fake_uploader())

    report = (image_dir / "c_003.txt").read_text(encoding="utf-8")
    assert report.startswith("errors: invalid parameters:")
    assert "https://cdn.example.com/c_003_original.png" in report


def test_failed_upload_leaves_empty_url(image_dir, clean_env, fake_uploader):
    uploader = fake_uploader(fail={"a_001_original.png"})
    result = batch_transform(config_path=_write_config(clean_env, image_dir), uploader=uploader)

    assert result.uploaded_count == 2
    assert result.failed_upload_count == 1
    blocks = (image_dir / "a_001.txt").read_text(encoding="utf-8").split("\n\n")
    assert blocks[1] == ""


def test_either_size_rule_from_config(clean_env, fake_uploader, write_png):
    src = clean_env / "images"
    src.mkdir()
    write_png(
        src / "d_004_output.png",
        "p\nNegative prompt: n\nSteps: 20, Sampler: Euler a, CFG scale: 7, Size: 400x600, Model: m",
    )
    cfg = _write_config(clean_env, src, "variant:\n  size_rule: either\n")
    result = batch_transform(config_path=cfg, uploader=fake_uploader())

    assert result.error_item_count == 1
    assert (src / "d_004.txt").read_text(encoding="utf-8").startswith(
        "errors: the width and height are larger than 512"
    )


def test_source_dir_argument_overrides_config(image_dir, clean_env, fake_uploader):
    result = batch_transform(source_dir=image_dir, uploader=fake_uploader())
    assert result.source_dir == str(image_dir)


def test_missing_source_dir_is_config_error(clean_env, fake_uploader):
    with pytest.raises(ValueError):
        batch_transform(uploader=fake_uploader())


def test_missing_directory_aborts_run(clean_env, fake_uploader):
    with pytest.raises(OSError):
        batch_transform(source_dir=clean_env / "missing", uploader=fake_uploader())


def test_finalize_item_records_parse_error_and_still_validates():
    item = ItemRecord(key="e_005", output="", controlnet={1: "u1"})
    finalize_item(item, TransformOptions())

    assert item.errors[0].startswith("invalid parameters:")
    assert item.errors[1] == "not found ControlNet-1 in the parameters"
    assert item.target_params == {}
    assert item.target_prompts == {}


def test_finalize_item_keeps_prompts_when_mapping_fails():
    # 구버전 출력: Model 없이 Model hash만 기록됨
    output = "p\nNegative prompt: n\nSteps: 20, Sampler: Euler a, CFG scale: 7, Size: 512x512, Model hash: abc"
    item = ItemRecord(key="f_006", output=output)
    finalize_item(item, TransformOptions())

    assert item.target_prompts == {"prompt": "p", "negative": "n"}
    assert item.target_params == {}
    assert item.errors == ["invalid parameters: missing field: Model"]
