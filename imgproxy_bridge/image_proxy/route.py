
from fastapi import APIRouter, Request
from fastapi.responses import Response

from imgproxy_bridge.vars import IMGPROXY_ENDPOINT

from .handler import handle
from .options import HandlerOptions

router = APIRouter()


@router.get(IMGPROXY_ENDPOINT)
async def proxy_image(request: Request) -> Response:
    """Serve ``?src=<bucket>/<object>&params=<pipeline>[&format=<ext>]`` through imgproxy."""
    state = request.app.state
    options: HandlerOptions = state.handler_options
    return await handle(
        state.imgproxy_base_url,
        request.query_params,
        options,
        transport=getattr(state, "backend_transport", None),
    )
