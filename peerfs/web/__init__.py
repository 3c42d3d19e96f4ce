from .gateway_context import GatewayContext
from .web_server import WebServer
