from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from ocrguard.ocr.remote_engine import EXTRACTION_PROMPT, RemoteVisionEngine
from ocrguard.util.image_utils import DownloadedImage


def _client(response) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    client.close = AsyncMock()
    return client


def _response(content):
    return Mock(choices=[Mock(message=Mock(content=content))])


@pytest.mark.asyncio
async def test_recognize_sends_inline_image_and_prompt():
    client = _client(_response("SPECIAL PROMO CODE: WIN"))
    engine = RemoteVisionEngine(api_key="k", model_name="vision-model", client=client)

    with patch(
        "ocrguard.ocr.remote_engine.download_image",
        return_value=DownloadedImage(b"\x89PNG", "image/png"),
    ):
        result = await engine.recognize("https://e.com/a.png")

    assert result.text == "SPECIAL PROMO CODE: WIN"
    kwargs = client.chat.completions.create.await_args.kwargs
    assert kwargs["model"] == "vision-model"
    content = kwargs["messages"][0]["content"]
    assert content[0]["image_url"]["url"].startswith("data:image/png;base64,")
    assert content[1]["text"] == EXTRACTION_PROMPT


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [Mock(choices=[]), _response(None)])
async def test_recognize_empty_response_is_empty_text(response):
    engine = RemoteVisionEngine(api_key="k", model_name="m", client=_client(response))

    with patch("ocrguard.ocr.remote_engine.download_image", return_value=DownloadedImage(b"x", "image/jpeg")):
        result = await engine.recognize("https://e.com/a.jpg")

    assert result.text == ""


@pytest.mark.asyncio
async def test_recognize_propagates_api_errors():
    client = _client(None)
    client.chat.completions.create.side_effect = RuntimeError("quota")
    engine = RemoteVisionEngine(api_key="k", model_name="m", client=client)

    with patch("ocrguard.ocr.remote_engine.download_image", return_value=DownloadedImage(b"x", "image/png")):
        with pytest.raises(RuntimeError):
            await engine.recognize("https://e.com/a.png")


@pytest.mark.asyncio
async def test_shutdown_closes_client():
    client = _client(None)
    engine = RemoteVisionEngine(api_key="k", model_name="m", client=client)
    await engine.shutdown()
    client.close.assert_awaited_once()
