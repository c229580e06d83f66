"""
Request and response handlers for the proxy server.
"""
from .request_handler import TransformOptions, TransformResult, transform_request_body
from .streaming_handler import ClientResponse, StreamConverter, sanitize_headers
from .response_forwarder import forward_response, relay_through_channel

__all__ = [
    'TransformOptions',
    'TransformResult',
    'transform_request_body',
    'ClientResponse',
    'StreamConverter',
    'sanitize_headers',
    'forward_response',
    'relay_through_channel',
]
