"""Tests for Pollinations Image Client."""

import io
from unittest.mock import MagicMock, patch

import pytest
import requests
from PIL import Image

from storyreel.services.image_client import PollinationsImageClient


@pytest.fixture
def image_client(settings, logger):
    return PollinationsImageClient(settings, logger)


def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_build_prompt_uses_first_80_chars(image_client):
    text = "x" * 200
    assert image_client.build_prompt(text) == "Cinematic, photorealistic scene: " + "x" * 80


def test_build_url_encodes_prompt(image_client):
    url = image_client.build_url("a cat, at night/day")
    assert url == "https://image.pollinations.ai/prompt/a%20cat%2C%20at%20night%2Fday"


@patch("storyreel.services.image_client.requests.get")
def test_generate_returns_image_bytes(mock_get, image_client):
    payload = png_bytes()
    mock_get.return_value = MagicMock(status_code=200, content=payload)

    assert image_client.generate("A quiet harbour") == payload

    kwargs = mock_get.call_args.kwargs
    assert kwargs["params"] == {"width": 1280, "height": 720, "nologo": "true"}
    assert kwargs["timeout"] == 90


@patch("storyreel.services.image_client.requests.get")
def test_generate_non_2xx_raises(mock_get, image_client):
    mock_get.return_value = MagicMock(status_code=429, content=b"", text="Too Many Requests")

    with pytest.raises(RuntimeError, match="429"):
        image_client.generate("A quiet harbour")


@patch("storyreel.services.image_client.requests.get")
def test_generate_timeout_raises(mock_get, image_client):
    mock_get.side_effect = requests.exceptions.Timeout()

    with pytest.raises(TimeoutError):
        image_client.generate("A quiet harbour")


@patch("storyreel.services.image_client.requests.get")
def test_generate_rejects_non_image_body(mock_get, image_client):
    mock_get.return_value = MagicMock(status_code=200, content=b"<html>error</html>")

    with pytest.raises(Exception):
        image_client.generate("A quiet harbour")
