"""
Web server for the product agents UI

Serves the single page and the small JSON API it polls.
"""
import asyncio
import base64
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Set

from aiohttp import web

from productagent.config import settings
from productagent.services.errors import UnsupportedInput
from productagent.services.image_loader import UploadedImage, load_image
from productagent.services.workflow import WorkflowOrchestrator, WorkflowStatus

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
DOWNLOAD_BASENAME = "enhanced-product"
DOWNLOAD_EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/webp": ".webp"}


@dataclass
class UISession:
    """Per-process UI state that is not owned by the orchestrator"""

    image: Optional[UploadedImage] = None
    run_task: Optional[asyncio.Task] = None
    tasks: Set[asyncio.Task] = field(default_factory=set)


async def index(request: web.Request) -> web.FileResponse:
    return web.FileResponse(STATIC_DIR / "index.html")


async def health_check(request: web.Request) -> web.Response:
    """Health check endpoint"""
    return web.Response(text="OK")


async def handle_upload(request: web.Request) -> web.Response:
    """
    Accept a product photo (multipart field "file").

    A new image always starts a new workflow instance: status goes back to
    idle and previous logs and results are dropped.
    """
    form = await request.post()
    upload = form.get('file')

    data = None
    filename = None
    content_type = None
    if isinstance(upload, web.FileField):
        data = upload.file.read()
        filename = upload.filename
        content_type = upload.content_type

    try:
        image = load_image(data, filename=filename, content_type=content_type)
    except UnsupportedInput as e:
        logger.info(f"Upload rejected: {e}")
        return web.json_response({"error": str(e)}, status=400)

    orchestrator: WorkflowOrchestrator = request.app['orchestrator']
    request.app['session'].image = image
    orchestrator.reset()

    return web.json_response({
        "preview_url": f"/api/image/{image.preview_handle}",
        "filename": image.filename,
        "mime_type": image.mime_type,
        "state": orchestrator.state.to_dict()
    })


async def handle_run(request: web.Request) -> web.Response:
    """Start the agents on the current image in the background"""
    orchestrator: WorkflowOrchestrator = request.app['orchestrator']
    session: UISession = request.app['session']
    image = session.image

    if image is None:
        return web.json_response({"error": "Upload a product image first"}, status=400)
    if orchestrator.is_busy:
        return web.json_response({"error": "Agents are already running"}, status=409)

    task = asyncio.create_task(orchestrator.run(image.encoded_payload, image.mime_type))
    session.run_task = task
    session.tasks.add(task)
    task.add_done_callback(session.tasks.discard)

    # Let the run reach its first await so the response shows "processing"
    await asyncio.sleep(0)

    return web.json_response(orchestrator.state.to_dict(), status=202)


async def handle_state(request: web.Request) -> web.Response:
    orchestrator: WorkflowOrchestrator = request.app['orchestrator']
    return web.json_response(orchestrator.state.to_dict())


async def handle_preview(request: web.Request) -> web.Response:
    """Original upload, addressed by its preview handle"""
    image = request.app['session'].image
    if image is None or image.preview_handle != request.match_info['handle']:
        raise web.HTTPNotFound(text="Image not found")
    return web.Response(body=image.payload, content_type=image.mime_type)


async def handle_download(request: web.Request) -> web.Response:
    """Studio result as a file download"""
    state = request.app['orchestrator'].state
    if state.status != WorkflowStatus.COMPLETE or not state.image:
        raise web.HTTPNotFound(text="No rendered image yet")

    filename = DOWNLOAD_BASENAME + DOWNLOAD_EXTENSIONS.get(state.image_mime_type, ".jpg")
    return web.Response(
        body=base64.b64decode(state.image),
        content_type=state.image_mime_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )


async def _cancel_background_tasks(app: web.Application):
    tasks = list(app['session'].tasks)
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)


def create_app(orchestrator: Optional[WorkflowOrchestrator] = None) -> web.Application:
    """
    Create aiohttp application for the UI

    Args:
        orchestrator: Optional orchestrator, e.g. with fake agents in tests
    """
    # Multipart overhead on top of the image itself
    app = web.Application(client_max_size=settings.MAX_UPLOAD_SIZE + 1024 * 1024)

    app['orchestrator'] = orchestrator or WorkflowOrchestrator()
    app['session'] = UISession()

    app.router.add_get('/', index)
    app.router.add_get('/health', health_check)
    app.router.add_post('/api/upload', handle_upload)
    app.router.add_post('/api/run', handle_run)
    app.router.add_get('/api/state', handle_state)
    app.router.add_get('/api/image/{handle}', handle_preview)
    app.router.add_get('/api/result/image', handle_download)
    app.router.add_static('/static/', STATIC_DIR)

    app.on_cleanup.append(_cancel_background_tasks)

    return app


async def run_web_server(host: Optional[str] = None, port: Optional[int] = None) -> web.AppRunner:
    """
    Run the UI server

    Args:
        host: Server host, defaults to settings.HOST
        port: Server port, defaults to settings.PORT
    """
    host = host or settings.HOST
    port = port or settings.PORT

    if not settings.is_api_key_configured:
        logger.warning("GEMINI_API_KEY is not set - agent requests will be rejected by the API")

    app = create_app()

    logger.info(f"Starting web server on {host}:{port}")

    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, host, port)
    await site.start()

    logger.info(f"Web server started: http://{host}:{port}/")
    return runner
