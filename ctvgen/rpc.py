"""Template oracle over a node's JSON-RPC interface

The HTTP transport is bitcointx.rpc.RPCCaller.  This module only adds
cookie-file credentials and the getdefaulttemplate call.
"""

import urllib.parse
from typing import Optional

from bitcointx.rpc import RPCCaller, JSONRPCError, HTTPClient_Type

from ctvgen.util import class_logger

DEFAULT_HTTP_TIMEOUT = 30


def read_cookie_file(cookie_file: str) -> str:
    """Return the 'user:password' pair stored in a node's .cookie file."""
    with open(cookie_file, 'r') as fd:
        authpair = fd.read().strip()
    if ':' not in authpair:
        raise ValueError(f'cookie file {cookie_file!r} does not contain '
                         f'a user:password pair')
    return authpair


def service_url_with_cookie(service_url: str, cookie_file: str) -> str:
    """Replace any credentials in service_url with the cookie's."""
    url = urllib.parse.urlparse(service_url)
    hostport = url.netloc.rpartition('@')[2]
    netloc = f'{read_cookie_file(cookie_file)}@{hostport}'
    return urllib.parse.urlunparse(url._replace(netloc=netloc))


def connect_rpc(service_url: str, cookie_file: Optional[str] = None,
                timeout: int = DEFAULT_HTTP_TIMEOUT,
                connection: Optional[HTTPClient_Type] = None) -> RPCCaller:
    """Build an RPCCaller for the node at service_url.

    Credentials come from the cookie file when one is given, otherwise from
    the user and password in the URL.
    """
    if cookie_file is not None:
        service_url = service_url_with_cookie(service_url, cookie_file)
    return RPCCaller(service_url=service_url, timeout=timeout,
                     connection=connection)


class TemplateOracle:
    """Computes default template hashes on a remote node.

    The result for an out-of-range input index is whatever the node
    returns; it is not checked here.
    """

    def __init__(self, rpc: RPCCaller) -> None:
        self.logger = class_logger(__name__, self.__class__.__name__)
        self.rpc = rpc

    def __call__(self, hex_tx: str, index: int, witness: bool) -> str:
        result = self.rpc.getdefaulttemplate(hex_tx, index, witness)
        if not isinstance(result, str):
            raise JSONRPCError({
                'code': -341,
                'message': f'getdefaulttemplate returned {type(result).__name__}, '
                           f'expected a hex string'})
        self.logger.debug(f'template for input {index}: {result}')
        return result


__all__ = (
    'read_cookie_file',
    'service_url_with_cookie',
    'connect_rpc',
    'TemplateOracle',
)
