"""Shared test fixtures for the umbrella_headers test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

import umbrella_headers.repair as repair_module
from umbrella_headers import config


class FakeDetector:
    """Detector stub that always reports the same charset."""

    def __init__(self, encoding: str) -> None:
        self.encoding = encoding
        self.calls: list[bytes] = []

    def detect(self, raw: bytes) -> str:
        self.calls.append(raw)
        return self.encoding


@pytest.fixture(autouse=True)
def _fresh_settings():
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def latin1() -> Callable[[str], str]:
    """Render text the way a Latin-1 header looks after a UTF-8 surrogateescape read."""

    def convert(text: str) -> str:
        return text.encode("latin-1").decode("utf-8", "surrogateescape")

    return convert


@pytest.fixture
def install_detector(monkeypatch) -> Callable[[str], FakeDetector]:
    def install(encoding: str) -> FakeDetector:
        detector = FakeDetector(encoding)
        monkeypatch.setattr(repair_module, "_detector", detector)
        return detector

    return install


@pytest.fixture
def latin1_detector(install_detector) -> FakeDetector:
    return install_detector("latin-1")


@pytest.fixture
def ascii_detector(install_detector) -> FakeDetector:
    return install_detector("ascii")


@pytest.fixture
def received_value() -> str:
    return "from mx.example.com by mail.example.com; Mon, 02 Jun 2025 12:00:00 +0000"
