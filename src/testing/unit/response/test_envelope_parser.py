from typing import Any, Dict, List, Optional

import pytest
from pydantic import BaseModel

from strapiclient import (
    DecodeError,
    EnvelopeShape,
    RemoteError,
    ResponseEnvelopeParser,
    StrapiResult,
)


class Article(BaseModel):
    id: int
    title: Optional[str] = None


COLLECTION_TEXT = (
    '{"data":[{"id":1}],"meta":{"pagination":{"page":1,"pageSize":25,"pageCount":1,"total":1}}}'
)


@pytest.fixture
def parser() -> ResponseEnvelopeParser:
    return ResponseEnvelopeParser()


def test_collection_envelope(parser):
    result = parser.parse(COLLECTION_TEXT, List[Dict[str, Any]])

    assert result.is_success
    assert result.shape is EnvelopeShape.Collection
    assert result.data == [{"id": 1}]
    assert result.total_count == 1
    assert result.current_page == 1
    assert result.page_size == 25
    assert result.page_count == 1


def test_collection_envelope_into_models(parser):
    text = (
        '{"data":[{"id":1,"title":"A"},{"id":2,"title":"B"}],'
        '"meta":{"pagination":{"start":0,"limit":2,"total":9}}}'
    )
    result = parser.parse(text, List[Article])

    assert [a.title for a in result.data] == ["A", "B"]
    assert result.pagination.start == 0
    assert result.pagination.limit == 2
    assert result.total_count == 9
    assert result.current_page is None


def test_single_item_envelope(parser):
    result = parser.parse('{"data":{"id":1}}', Article)

    assert result.is_success
    assert result.shape is EnvelopeShape.Single
    assert result.data == Article(id=1)
    assert result.meta is None
    assert result.total_count is None


def test_single_item_is_not_a_collection(parser):
    result = parser.parse('{"data":{"id":1}}', Dict[str, Any])
    assert result.shape is EnvelopeShape.Single
    assert result.data == {"id": 1}


def test_single_item_meta_is_kept(parser):
    result = parser.parse('{"data":{"id":1},"meta":{"availableLocales":["fr"]}}', Article)

    assert result.meta is not None
    assert result.meta.model_extra == {"availableLocales": ["fr"]}


def test_raw_fallback(parser):
    result = parser.parse('[{"id":1},{"id":2}]', List[Article])

    assert result.shape is EnvelopeShape.Raw
    assert [a.id for a in result.data] == [1, 2]


def test_failed_attempt_falls_through_to_raw(parser):
    # 'data' is an object but the target is a list: the single-item attempt
    # fails and the whole document is decoded instead.
    result = parser.parse('{"data":{"id":1}}', Dict[str, Dict[str, int]])

    assert result.shape is EnvelopeShape.Raw
    assert result.data == {"data": {"id": 1}}


def test_nested_data_array_does_not_fool_detection(parser):
    text = '{"data":{"id":1,"title":"x \\"data\\":[ y"}}'
    result = parser.parse(text, Article)

    assert result.shape is EnvelopeShape.Single
    assert result.data.id == 1


def test_only_last_failure_is_surfaced(parser):
    result = parser.parse('{"data":{"title":"no id"}}', Article)

    assert not result.is_success
    assert result.shape is EnvelopeShape.Invalid
    assert isinstance(result.error, DecodeError)
    assert result.data is None
    assert result.error.payload == '{"data":{"title":"no id"}}'


def test_invalid_json(parser):
    result = parser.parse("<html>oops</html>", Article)

    assert isinstance(result.error, DecodeError)
    assert result.shape is EnvelopeShape.Invalid
    assert result.error_message is not None


def test_error_envelope(parser):
    text = '{"error":{"status":404,"name":"NotFoundError","message":"Not Found","details":{}}}'
    result = parser.parse(text, Article, status_code=404)

    assert not result.is_success
    assert result.shape is EnvelopeShape.Error
    assert isinstance(result.error, RemoteError)
    assert result.error.status == 404
    assert result.error.name == "NotFoundError"
    assert result.error.details == {}
    assert result.error_message == "Not Found"
    assert result.status_code == 404


def test_error_status_wins_over_data_shape(parser):
    result = parser.parse('{"data":{"id":1}}', Article, status_code=500)

    assert isinstance(result.error, RemoteError)
    assert result.error.status == 500
    assert result.data is None


def test_malformed_error_body(parser):
    result = parser.parse("Bad Gateway", Article, status_code=502)

    assert isinstance(result.error, RemoteError)
    assert result.error.status == 502
    assert result.error.name is None
    assert result.error.message == "Bad Gateway"


def test_raise_for_error():
    ok = StrapiResult(data=[1], status_code=200, shape=EnvelopeShape.Raw)
    assert ok.raise_for_error() is ok

    failed = StrapiResult(status_code=403, error=RemoteError(403, "ForbiddenError", "Forbidden"))
    with pytest.raises(RemoteError, match="Forbidden"):
        failed.raise_for_error()


def test_validation_context_is_forwarded():
    from pydantic import ValidationInfo, field_validator

    class Tagged(BaseModel):
        id: int
        tag: Optional[str] = None

        @field_validator("tag", mode="before")
        @classmethod
        def from_context(cls, value, info: ValidationInfo):
            return (info.context or {}).get("tag", value)

    parser = ResponseEnvelopeParser(context={"tag": "from-context"})
    result = parser.parse('{"data":{"id":1,"tag":"original"}}', Tagged)

    assert result.data.tag == "from-context"
