from starlette.testclient import TestClient
from peerfs.node import NodeConfig
from peerfs.web import GatewayContext, WebServer

def setup_client(config:NodeConfig=None) -> tuple[GatewayContext, TestClient]:
    ctx = GatewayContext(config)
    client = TestClient(WebServer(ctx).app())
    return ctx, client

def setup_mapped_client(config:NodeConfig=None) -> tuple[GatewayContext, TestClient]:
    ctx, client = setup_client(config)
    assert client.get("/api/createnodes").status_code == 200
    assert client.get("/api/mapnodes").status_code == 200
    return ctx, client
