import json

from imgbatch.domain.models import BatchTransformResult
from imgbatch.entrypoints.jobs import run_batch_transform


def _result() -> BatchTransformResult:
    return BatchTransformResult(
        source_dir="/data",
        file_count=3,
        item_count=1,
        malformed_files=[],
        uploaded_count=2,
        failed_upload_count=0,
        error_item_count=0,
        report_paths=["/data/a_001.txt"],
    )


def test_main_prints_summary(monkeypatch, clean_env, capsys):
    monkeypatch.setattr(run_batch_transform, "batch_transform", lambda **kwargs: _result())

    assert run_batch_transform.main() == 0
    assert json.loads(capsys.readouterr().out)["report_paths"] == ["/data/a_001.txt"]


def test_main_returns_1_on_failure(monkeypatch, clean_env):
    def boom(**kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(run_batch_transform, "batch_transform", boom)
    assert run_batch_transform.main() == 1
