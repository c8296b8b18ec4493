from pathlib import Path
from typing import List, Optional, Set

import pytest
from PIL import Image
from PIL.PngImagePlugin import PngInfo

SAMPLE_PARAMETERS = (
    "masterpiece, 1girl, smile\n"
    "Negative prompt: lowres, bad anatomy\n"
    "Steps: 35, Sampler: DPM++, CFG scale: 7, Seed: 12345, Size: 768x512, "
    "Model hash: abc123, Model: AnythingV5V3_v5PrtRE, Denoising strength: 0.5, "
    'ControlNet 0: "preprocessor: tile_resample, model: control_v11f1e_sd15_tile [a371b31b], '
    "weight: 1, starting/ending: (0, 0.8), resize mode: Crop and Resize, pixel perfect: True, "
    'control mode: Balanced, preprocessor params: (512, 1, 64)", '
    "Hires upscale: 2, Hires steps: 10, Hires upscaler: Latent, Version: v1.2.0"
)

OSS_ENV_NAMES = (
    "OSS_ACCESS_KEY_ID",
    "OSS_ACCESS_KEY_SECRET",
    "OSS_BUCKET",
    "OSS_REGION",
    "OSS_ENDPOINT",
    "OSS_BASE_PATH",
    "OSS_ORIGINAL_OSS_URL",
    "OSS_BASE_URL",
)


class FakeUploader:
    """MinIOWriter.upload_file과 같은 시그니처의 테스트용 업로더."""

    def __init__(self, fail: Optional[Set[str]] = None, base_url: str = "https://cdn.example.com/"):
        self.fail = fail or set()
        self.base_url = base_url
        self.calls: List[str] = []

    def upload_file(self, file_path: Path, filename: Optional[str] = None) -> str:
        name = filename or file_path.name
        self.calls.append(name)
        if name in self.fail:
            return ""
        return f"{self.base_url}{name}"


def _write_png(path: Path, parameters: Optional[str] = None) -> Path:
    info = PngInfo()
    if parameters is not None:
        info.add_text("parameters", parameters)
    Image.new("RGB", (8, 8), color=(200, 10, 10)).save(path, pnginfo=info)
    return path


@pytest.fixture
def sample_parameters() -> str:
    return SAMPLE_PARAMETERS


@pytest.fixture
def write_png():
    """(path, parameters=None) -> path 형태로 parameters text chunk를 가진 PNG를 만든다."""
    return _write_png


@pytest.fixture
def fake_uploader():
    """FakeUploader 클래스. 테스트마다 fail 목록을 바꿔 생성한다."""
    return FakeUploader


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in OSS_ENV_NAMES:
        # setenv 후 delenv: 테스트 중 load_dotenv가 넣은 값도 종료 시 제거됨
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
