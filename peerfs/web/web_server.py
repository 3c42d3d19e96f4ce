import codecs
import logging
import posixpath
from contextlib import asynccontextmanager
import pydantic
import uvicorn
from starlette.applications import Starlette
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from peerfs.blocks import *
from peerfs.errors import *
from peerfs.fs.path_helpers import enforce_entry_name
from .gateway_context import GatewayContext
from .models import *

# HTTP API to create two nodes, connect them, publish content on the first node and read it through the second.
# It utilizes the Starlette framework (https://www.starlette.io/).
#
# All writes go to node 1, all reads go to node 2, so a successful read of freshly published content
# means it was fetched over the link between the nodes.
#
# See the 'app' method for the routes that are supported.

logger = logging.getLogger(__name__)

UPLOADS_DIR = "uploads"

_ERROR_STATUS_CODES = {
    ValidationError: 400,
    NotFound: 404,
    InvalidState: 409,
    PeerConnectionError: 409,
    LinkError: 502,
}

class WebServer:
    __CID_PARAM = "cid"
    __UPLOAD_FIELD = "file"

    def __init__(self, ctx:GatewayContext):
        self.ctx = ctx
        self.server = None

    def app(self) -> Starlette:
        routes = [
            Route('/', self.get_root),
            Route('/api/createnodes', self.create_nodes),
            Route('/api/mapnodes', self.map_nodes),
            Route('/api/nodes', self.get_nodes),
            Route('/api/content', self.post_content, methods=['POST']),
            Route(f"/api/content/{{{self.__CID_PARAM}}}", self.get_content),
            Route('/api/upload', self.post_upload, methods=['POST']),
            Route(f"/api/file/{{{self.__CID_PARAM}}}", self.get_file),
        ]
        return Starlette(
            routes=routes,
            exception_handlers={PeerFsError: self.peerfs_error_handler},
            lifespan=self.lifespan)

    @asynccontextmanager
    async def lifespan(self, app:Starlette):
        yield
        await self.ctx.stop()

    async def run(self, host:str="127.0.0.1", port:int=9632):
        config = uvicorn.Config(app=self.app(), loop="asyncio", host=host, port=port, log_level="info")
        self.server = uvicorn.Server(config)
        logger.info(f"starting node server on {host}:{port}")
        await self.server.serve()

    def stop(self):
        if(self.server is not None):
            self.server.should_exit = True

    #=========================
    # Route handlers
    #=========================
    async def get_root(self, request:Request):
        return PlainTextResponse('Hello IPFS!')

    async def create_nodes(self, request:Request):
        assert request.method == "GET"
        nodes = await self.ctx.create_nodes()
        return JSONResponse([NodeStatus(id=node.peer_id, status=node.is_running).model_dump(exclude={'addresses'})
                             for node in nodes])

    async def map_nodes(self, request:Request):
        assert request.method == "GET"
        link = await self.ctx.map_nodes()
        remote = link.remote(self.ctx.node1)
        return JSONResponse(MapResult(remotePeer=remote.peer_id, status=link.status).model_dump())

    async def get_nodes(self, request:Request):
        assert request.method == "GET"
        return JSONResponse([NodeStatus(id=node.peer_id, status=node.is_running, addresses=node.addresses).model_dump()
                             for node in self.ctx.nodes])

    async def post_content(self, request:Request):
        assert request.method == "POST"
        request_body_bytes = await request.body()
        if(len(request_body_bytes) == 0):
            raise HTTPException(status_code=400, detail="Request body must not be empty")
        try:
            content_request = ContentRequest.model_validate_json(request_body_bytes)
        except pydantic.ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Expected a json body with a 'content' string: {e.errors()[0]['msg']}")
        cid = await self.ctx.node1.publish(content_request.content.encode('utf-8'))
        cid_str = to_content_id_str(cid)
        logger.info(f"Added content: {cid_str}")
        return PlainTextResponse(cid_str)

    async def get_content(self, request:Request):
        assert request.method == "GET"
        cid = self.__validate_cid(request)
        content = await self.__read_text(cid)
        return JSONResponse(ContentResponse(node=self.ctx.node2.peer_id, content=content).model_dump())

    async def post_upload(self, request:Request):
        assert request.method == "POST"
        async with request.form() as form:
            upload = form.get(self.__UPLOAD_FIELD)
            if(upload is None or not isinstance(upload, UploadFile)):
                raise HTTPException(status_code=400, detail=f"Multipart field '{self.__UPLOAD_FIELD}' with a file is required")
            filename = posixpath.basename((upload.filename or "").replace("\\", "/"))
            enforce_entry_name(filename)
            data = await upload.read()
        fs = self.ctx.fs1
        file_id = await fs.add_file(None, data)
        # the upload fails if the file cannot be linked into the uploads directory
        uploads_id = await fs.add_directory(UPLOADS_DIR)
        uploads_id = await fs.link(uploads_id, filename, file_id)
        await fs.write(UPLOADS_DIR, uploads_id)
        logger.info(f"Uploaded '{filename}' ({len(data)} bytes) as {to_content_id_str(file_id)}")
        response = UploadResponse(
            message="File uploaded successfully",
            file=UploadedFile(filename=filename, size=len(data), data=to_content_id_str(file_id)),
            directory=to_content_id_str(uploads_id))
        return JSONResponse(response.model_dump(), status_code=201)

    async def get_file(self, request:Request):
        assert request.method == "GET"
        cid = self.__validate_cid(request)
        content = await self.__read_text(cid)
        return JSONResponse(ContentResponse(node=self.ctx.node2.peer_id, content=content).model_dump())

    async def peerfs_error_handler(self, request:Request, exc:Exception):
        status_code = 500
        for error_type, code in _ERROR_STATUS_CODES.items():
            if isinstance(exc, error_type):
                status_code = code
                break
        if status_code >= 500:
            logger.warning(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse({"error": type(exc).__name__, "detail": str(exc)}, status_code=status_code)

    async def __read_text(self, cid:ContentId) -> str:
        """Reads a file through node 2, chunk by chunk, as text."""
        # chunk boundaries can split multi-byte characters, so decode incrementally
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        content = ""
        async for chunk in self.ctx.fs2.cat(cid):
            content += decoder.decode(chunk)
        content += decoder.decode(b"", final=True)
        return content

    def __validate_cid(self, request:Request) -> ContentId:
        if(self.__CID_PARAM not in request.path_params):
            raise HTTPException(status_code=400, detail="Content id not set")
        cid_str = request.path_params[self.__CID_PARAM]
        if(not is_content_id_str(cid_str)):
            raise HTTPException(status_code=400, detail=f"Invalid content id ({cid_str})")
        return to_content_id(cid_str)
