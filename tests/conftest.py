"""
Shared fixtures.
"""

import pytest

from fakes import FakeInputSource, FakeSynthesizer, RecordingToken


@pytest.fixture
def source() -> FakeInputSource:
    return FakeInputSource()


@pytest.fixture
def synth() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def token() -> RecordingToken:
    return RecordingToken()
