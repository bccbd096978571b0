from .client import StrapiRestClient as StrapiRestClient
from .config import ClientConfig as ClientConfig
from .transport import (
    HttpxTransport as HttpxTransport,
    Transport as Transport,
    TransportResponse as TransportResponse,
)
