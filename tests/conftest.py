import base64

import pytest

from productagent.services.copywriter import CopywriterAgent
from productagent.services.studio import StudioAgent
from tests.fakes import FakeGemini, make_image_bytes

COPY_MODEL = "copy-model"
STUDIO_MODEL = "studio-model"


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def encoded_png(png_bytes) -> str:
    return base64.b64encode(png_bytes).decode('utf-8')


@pytest.fixture
async def fake_gemini(aiohttp_server):
    fake = FakeGemini()
    server = await aiohttp_server(fake.create_app())
    fake.base_url = str(server.make_url('/v1beta'))
    return fake


@pytest.fixture
def copywriter(fake_gemini) -> CopywriterAgent:
    return CopywriterAgent(api_key="test-key", model=COPY_MODEL, base_url=fake_gemini.base_url, timeout=5)


@pytest.fixture
def studio(fake_gemini) -> StudioAgent:
    return StudioAgent(api_key="test-key", model=STUDIO_MODEL, base_url=fake_gemini.base_url, timeout=5)
