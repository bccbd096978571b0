import threading
from typing import List, Optional

import httpx
import pytest
import respx
from pydantic import BaseModel

from strapiclient import (
    ArgumentError,
    ClientConfig,
    DecodeError,
    EnvelopeShape,
    Field,
    RemoteError,
    RequestMethod,
    StrapiRequest,
    StrapiRestClient,
    TransportFailure,
    TransportResponse,
)
from strapiclient.blocks import BlockComponent, BlockList, GenericBlock, block_component

BASE_URL = "http://localhost:1337/api"
ARTICLES_URL = BASE_URL + "/articles"

COLLECTION_BODY = {
    "data": [
        {"id": 1, "title": "First", "blocks": []},
        {"id": 2, "title": "Second", "blocks": []},
    ],
    "meta": {"pagination": {"page": 1, "pageSize": 2, "pageCount": 3, "total": 6}},
}


class Article(BaseModel):
    id: int
    title: str
    blocks: BlockList = []


@block_component("sections.hero")
class HeroBlock(BlockComponent):
    heading: Optional[str] = None


class FakeTransport:
    """Records every call and replays a canned response."""

    def __init__(self, response: TransportResponse):
        self.response = response
        self.calls = []
        self.closed = False

    def send(self, method, url, body=None, cancel_token=None):
        self.calls.append((method, url, body, cancel_token))
        return self.response

    def close(self):
        self.closed = True


def _config(**kwargs) -> ClientConfig:
    kwargs.setdefault("backoff_factor", 0)
    return ClientConfig(base_url=BASE_URL, **kwargs)


def test_execute_collection():
    request = StrapiRequest.get("articles").with_page(1).with_page_size(2)

    with respx.mock:
        route = respx.get(url__startswith=ARTICLES_URL).mock(
            return_value=httpx.Response(200, json=COLLECTION_BODY)
        )
        with StrapiRestClient(_config(api_key="secret")) as client:
            result = client.execute(request, List[Article])

    assert result.is_success
    assert result.shape is EnvelopeShape.Collection
    assert [a.title for a in result.data] == ["First", "Second"]
    assert result.total_count == 6
    assert result.page_count == 3

    sent = route.calls.last.request
    assert sent.headers["Authorization"] == "Bearer secret"
    assert sent.url.params["pagination[page]"] == "1"
    assert sent.url.params["pagination[pageSize]"] == "2"


def test_execute_single_item_by_id():
    with respx.mock:
        route = respx.get(ARTICLES_URL + "/1").mock(
            return_value=httpx.Response(200, json={"data": {"id": 1, "title": "First"}})
        )
        with StrapiRestClient(_config()) as client:
            result = client.execute(StrapiRequest.get("articles", "/1"), Article)

    assert result.shape is EnvelopeShape.Single
    assert result.data.title == "First"
    assert route.call_count == 1


def test_filters_reach_the_server_decoded():
    request = StrapiRequest.get("articles").with_filter(Field("title").eq("Test Article"))

    with respx.mock:
        route = respx.get(url__startswith=ARTICLES_URL).mock(
            return_value=httpx.Response(200, json={"data": [], "meta": {}})
        )
        with StrapiRestClient(_config()) as client:
            client.execute(request, List[Article])

    assert route.calls.last.request.url.params["filters[title][$eq]"] == "Test Article"


def test_error_envelope_is_returned_not_raised():
    body = {"error": {"status": 404, "name": "NotFoundError", "message": "Not Found"}}

    with respx.mock:
        route = respx.get(ARTICLES_URL + "/99").mock(return_value=httpx.Response(404, json=body))
        with StrapiRestClient(_config()) as client:
            result = client.execute(StrapiRequest.get("articles", "/99"), Article)

    assert route.call_count == 1
    assert not result.is_success
    assert isinstance(result.error, RemoteError)
    assert result.error.status == 404
    assert result.error.name == "NotFoundError"


def test_server_errors_are_retried_then_decoded():
    with respx.mock:
        route = respx.get(ARTICLES_URL).mock(
            return_value=httpx.Response(500, text="Internal Server Error")
        )
        with StrapiRestClient(_config(max_retries=2)) as client:
            result = client.execute(StrapiRequest.get("articles"), List[Article])

    assert route.call_count == 3
    assert isinstance(result.error, RemoteError)
    assert result.error.status == 500
    assert result.error.message == "Internal Server Error"


def test_decode_error_is_returned():
    with respx.mock:
        respx.get(ARTICLES_URL).mock(return_value=httpx.Response(200, json={"data": {"id": 1}}))
        with StrapiRestClient(_config()) as client:
            result = client.execute(StrapiRequest.get("articles"), List[Article])

    assert isinstance(result.error, DecodeError)
    assert result.status_code == 200


def test_transport_failure_propagates():
    with respx.mock:
        respx.get(ARTICLES_URL).mock(side_effect=httpx.ConnectError("refused"))
        with StrapiRestClient(_config(max_retries=0)) as client:
            with pytest.raises(TransportFailure):
                client.execute(StrapiRequest.get("articles"), List[Article])


def test_missing_collection_fails_before_sending():
    transport = FakeTransport(TransportResponse(200, "{}"))
    client = StrapiRestClient(_config(), transport=transport)

    with pytest.raises(ArgumentError):
        client.execute(StrapiRequest(), dict)
    assert transport.calls == []


def test_custom_transport_receives_method_body_and_token():
    transport = FakeTransport(TransportResponse(200, '{"data":{"id":5,"title":"New"}}'))
    token = threading.Event()
    body = {"data": {"title": "New"}}

    with StrapiRestClient(_config(), transport=transport) as client:
        result = client.execute(StrapiRequest.post("articles", body), Article, cancel_token=token)

    assert transport.calls == [(RequestMethod.POST, ARTICLES_URL, body, token)]
    assert result.data.id == 5
    # Transports supplied by the caller are not closed by the client
    assert not transport.closed


def test_client_registry_decodes_block_fields(empty_registry):
    empty_registry.register_from([HeroBlock])
    text = (
        '{"data":{"id":1,"title":"Home","blocks":['
        '{"id":1,"__component":"sections.hero","heading":"Welcome"},'
        '{"id":2,"__component":"shared.quote","title":"Q"}]}}'
    )
    transport = FakeTransport(TransportResponse(200, text))

    with StrapiRestClient(_config(), transport=transport, registry=empty_registry) as client:
        result = client.execute(StrapiRequest.get("articles", "/1"), Article)

    hero, quote = result.data.blocks
    assert isinstance(hero, HeroBlock)
    assert hero.heading == "Welcome"
    # Not registered in this client's registry
    assert type(quote) is GenericBlock


def test_get_raw_json():
    text = '{"data":[{"id":1,"title":"First"}],"meta":{}}'

    with respx.mock:
        respx.get(ARTICLES_URL).mock(return_value=httpx.Response(200, text=text))
        with StrapiRestClient(_config()) as client:
            raw = client.get_raw_json(StrapiRequest.get("articles"))

    assert raw == text


def test_get_raw_json_raises_remote_error():
    body = {"error": {"status": 403, "name": "ForbiddenError", "message": "Forbidden"}}

    with respx.mock:
        respx.get(ARTICLES_URL).mock(return_value=httpx.Response(403, json=body))
        with StrapiRestClient(_config()) as client:
            with pytest.raises(RemoteError) as excinfo:
                client.get_raw_json(StrapiRequest.get("articles"))

    assert excinfo.value.status == 403
    assert excinfo.value.name == "ForbiddenError"


def test_owned_transport_is_closed_on_exit():
    with StrapiRestClient(_config()) as client:
        http_client = client._transport._client

    assert http_client.is_closed
    # Closing twice is harmless
    client.close()


def test_from_env(monkeypatch):
    monkeypatch.setenv("STRAPI_BASE_URL", BASE_URL)
    monkeypatch.setenv("STRAPI_API_KEY", "token")

    transport = FakeTransport(TransportResponse(200, "{}"))
    with StrapiRestClient.from_env(transport=transport) as client:
        assert client.config.api_key == "token"
        assert client.build_url(StrapiRequest.get("articles")) == ARTICLES_URL
