import asyncio
import base64

import aiohttp
import pytest

from productagent.services.errors import AgentRequestFailed
from productagent.services.workflow import WorkflowOrchestrator
from productagent.web.server import create_app
from tests.fakes import RENDERED_IMAGE, FakeCopywriter, FakeStudio, make_image_bytes


def upload_form(data: bytes, filename: str = "mouse.png", content_type: str = "image/png") -> aiohttp.FormData:
    form = aiohttp.FormData()
    form.add_field('file', data, filename=filename, content_type=content_type)
    return form


@pytest.fixture
def copy_agent():
    return FakeCopywriter()


@pytest.fixture
def studio_agent():
    return FakeStudio()


@pytest.fixture
async def client(aiohttp_client, copy_agent, studio_agent):
    app = create_app(WorkflowOrchestrator(copy_agent, studio_agent))
    return await aiohttp_client(app)


async def finish_run(client):
    task = client.server.app['session'].run_task
    if task is not None:
        await task


async def test_health(client):
    resp = await client.get('/health')

    assert resp.status == 200
    assert await resp.text() == "OK"


async def test_index_page(client):
    resp = await client.get('/')

    assert resp.status == 200
    assert "Activate Agents" in await resp.text()


async def test_upload_returns_preview(client, png_bytes):
    resp = await client.post('/api/upload', data=upload_form(png_bytes))

    assert resp.status == 200
    body = await resp.json()
    assert body["mime_type"] == "image/png"
    assert body["filename"] == "mouse.png"
    assert body["state"]["status"] == "idle"

    preview = await client.get(body["preview_url"])
    assert preview.status == 200
    assert preview.content_type == "image/png"
    assert await preview.read() == png_bytes


async def test_upload_without_file(client):
    resp = await client.post('/api/upload', data={"note": "nothing here"})

    assert resp.status == 400
    assert "No image" in (await resp.json())["error"]


async def test_upload_non_image(client):
    resp = await client.post('/api/upload', data=upload_form(b"plain text", "notes.txt", "text/plain"))

    assert resp.status == 400


async def test_run_requires_upload(client, copy_agent):
    resp = await client.post('/api/run')

    assert resp.status == 400
    assert copy_agent.calls == []


async def test_run_completes_and_result_downloads(client, png_bytes, copy_agent, studio_agent):
    await client.post('/api/upload', data=upload_form(png_bytes))

    resp = await client.post('/api/run')
    assert resp.status == 202
    await finish_run(client)

    state = await (await client.get('/api/state')).json()
    assert state["status"] == "complete"
    assert state["title"] == copy_agent.title
    assert state["image"] == f"data:image/jpeg;base64,{RENDERED_IMAGE}"
    assert len(state["logs"]) >= 4

    encoded = base64.b64encode(png_bytes).decode('utf-8')
    assert studio_agent.calls == [(encoded, "image/png")]

    download = await client.get('/api/result/image')
    assert download.status == 200
    assert download.headers["Content-Disposition"] == 'attachment; filename="enhanced-product.jpg"'
    assert await download.read() == base64.b64decode(RENDERED_IMAGE)


async def test_download_before_complete(client):
    resp = await client.get('/api/result/image')

    assert resp.status == 404


async def test_copy_failure_reported_in_state(client, png_bytes, copy_agent, studio_agent):
    copy_agent.error = AgentRequestFailed("Copywriter", 500)
    await client.post('/api/upload', data=upload_form(png_bytes))

    await client.post('/api/run')
    await finish_run(client)

    state = await (await client.get('/api/state')).json()
    assert state["status"] == "error"
    assert "Copywriter" in state["error"]
    assert studio_agent.calls == []
    assert (await client.get('/api/result/image')).status == 404


async def test_new_upload_resets_workflow(client, png_bytes):
    await client.post('/api/upload', data=upload_form(png_bytes))
    await client.post('/api/run')
    await finish_run(client)

    resp = await client.post('/api/upload', data=upload_form(png_bytes, "other.png"))
    state = (await resp.json())["state"]

    assert state["status"] == "idle"
    assert state["logs"] == []
    assert state["error"] is None
    assert state["title"] is None


async def test_old_preview_handle_is_gone_after_new_upload(client, png_bytes):
    first = await (await client.post('/api/upload', data=upload_form(png_bytes))).json()
    await client.post('/api/upload', data=upload_form(png_bytes))

    resp = await client.get(first["preview_url"])

    assert resp.status == 404


async def test_run_while_busy_conflicts(client, png_bytes, copy_agent):
    gate = asyncio.Event()
    copy_agent.gate = gate
    await client.post('/api/upload', data=upload_form(png_bytes))

    first = await client.post('/api/run')
    second = await client.post('/api/run')

    assert first.status == 202
    assert (await first.json())["status"] == "processing"
    assert second.status == 409

    gate.set()
    await finish_run(client)
    assert len(copy_agent.calls) == 1


async def test_download_uses_rendered_image_type(client, png_bytes, studio_agent):
    rendered = make_image_bytes("PNG", (8, 8))
    studio_agent.image = base64.b64encode(rendered).decode('utf-8')
    await client.post('/api/upload', data=upload_form(png_bytes))
    await client.post('/api/run')
    await finish_run(client)

    download = await client.get('/api/result/image')

    assert download.status == 200
    assert download.content_type == "image/png"
    assert download.headers["Content-Disposition"] == 'attachment; filename="enhanced-product.png"'
    assert await download.read() == rendered


async def test_upload_unsupported_format(client):
    resp = await client.post('/api/upload', data=upload_form(make_image_bytes("GIF"), "anim.gif", "image/gif"))

    assert resp.status == 400
    assert "Unsupported image format" in (await resp.json())["error"]
