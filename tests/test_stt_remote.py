from __future__ import annotations

import io
import json
import urllib.error
import urllib.request

import pytest

from clipscribe.exceptions import TranscriptionFailed
from clipscribe.models import CapturedAudio
from clipscribe.services.stt_remote import RemoteSpeechToText

AUDIO = CapturedAudio(data=b"RIFF....WAVE", filename="recorded.wav", sample_rate=16000)


class FakeResponse:
    def __init__(self, body: bytes, content_type: str) -> None:
        self._body = body
        self.headers = {"Content-Type": content_type}

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None


@pytest.fixture
def urlopen(monkeypatch):
    calls = []

    def install(response=None, error=None):
        def fake_urlopen(request, timeout=None, context=None):
            calls.append(request)
            if error is not None:
                raise error
            return response

        monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
        return calls

    return install


def test_json_response(urlopen) -> None:
    calls = urlopen(FakeResponse(json.dumps({"text": " hello world "}).encode(), "application/json"))
    stt = RemoteSpeechToText(base_url="http://whisper:9000/")

    assert stt.transcribe(AUDIO) == "hello world"
    request = calls[0]
    assert request.full_url == "http://whisper:9000/transcribe"
    assert request.data == AUDIO.data
    assert request.get_header("Content-type") == "audio/wav"
    assert request.get_method() == "POST"


def test_plain_text_response_with_language(urlopen) -> None:
    calls = urlopen(FakeResponse(b"bonjour\n", "text/plain"))
    stt = RemoteSpeechToText(base_url="http://whisper:9000")
    assert stt.transcribe(AUDIO, language="fr") == "bonjour"
    assert calls[0].full_url == "http://whisper:9000/transcribe?language=fr"


def test_http_error(urlopen) -> None:
    error = urllib.error.HTTPError("http://whisper:9000/transcribe", 503, "busy", hdrs=None, fp=io.BytesIO(b"overloaded"))
    urlopen(error=error)
    with pytest.raises(TranscriptionFailed, match="503"):
        RemoteSpeechToText(base_url="http://whisper:9000").transcribe(AUDIO)


def test_unreachable_server(urlopen) -> None:
    urlopen(error=urllib.error.URLError("Name or service not known"))
    with pytest.raises(TranscriptionFailed, match="could not reach"):
        RemoteSpeechToText(base_url="http://whisper:9000").transcribe(AUDIO)


def test_json_without_text(urlopen) -> None:
    urlopen(FakeResponse(b'{"error": "no speech"}', "application/json"))
    with pytest.raises(TranscriptionFailed):
        RemoteSpeechToText(base_url="http://whisper:9000").transcribe(AUDIO)
