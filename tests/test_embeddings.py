import base64
import struct

import pytest

from gptkit.embeddings import (
    Base64Embedding,
    Embedding,
    EmbeddingEncodingFormat,
    EmbeddingModel,
    EmbeddingRequest,
    EmbeddingRequestStrings,
    EmbeddingRequestTokens,
    EmbeddingResponse,
    EmbeddingResponseBase64,
    create_embeddings_call,
    decode_base64_floats,
    parse_embeddings_response,
)
from gptkit.errors import VectorLengthMismatchError
from gptkit.request_builder import JSONMarshaller

DEPRECATED_MODELS = [
    EmbeddingModel.ADA_SIMILARITY,
    EmbeddingModel.BABBAGE_SIMILARITY,
    EmbeddingModel.CURIE_SIMILARITY,
    EmbeddingModel.DAVINCI_SIMILARITY,
    EmbeddingModel.ADA_SEARCH_DOCUMENT,
    EmbeddingModel.ADA_SEARCH_QUERY,
    EmbeddingModel.BABBAGE_SEARCH_DOCUMENT,
    EmbeddingModel.BABBAGE_SEARCH_QUERY,
    EmbeddingModel.CURIE_SEARCH_DOCUMENT,
    EmbeddingModel.CURIE_SEARCH_QUERY,
    EmbeddingModel.DAVINCI_SEARCH_DOCUMENT,
    EmbeddingModel.DAVINCI_SEARCH_QUERY,
    EmbeddingModel.ADA_CODE_SEARCH_CODE,
    EmbeddingModel.ADA_CODE_SEARCH_TEXT,
    EmbeddingModel.BABBAGE_CODE_SEARCH_CODE,
    EmbeddingModel.BABBAGE_CODE_SEARCH_TEXT,
]

TEXTS = ["The food was delicious and the waiter", "Other examples of embedding request"]
SAMPLE_VECTORS = [[1.23, 4.56, 7.89], [-0.006968617, -0.0052718227, 0.011901081]]
SAMPLE_BASE64 = ["pHCdP4XrkUDhevxA", "/1jku0G/rLvA/EI8"]


def _float_payload():
    return {"data": [{"object": "", "embedding": v, "index": 0} for v in SAMPLE_VECTORS]}


def _base64_payload():
    return {"data": [{"object": "", "embedding": e, "index": 0} for e in SAMPLE_BASE64]}


@pytest.mark.parametrize("model", DEPRECATED_MODELS)
def test_request_marshals_model(model):
    needle = f'"model":"{model.value}"'.encode()
    requests = [
        EmbeddingRequest(input=TEXTS, model=model),
        EmbeddingRequest(input=TEXTS, model=model, extra_body={"input_type": "query", "truncate": "NONE"}),
        EmbeddingRequestStrings(input=TEXTS, model=model).convert(),
        EmbeddingRequestTokens(
            input=[[464, 2057, 373, 12625, 290, 262, 46612], [6395, 6096, 286, 11525, 12083, 2581]],
            model=model,
        ).convert(),
    ]
    for request in requests:
        assert needle in JSONMarshaller().marshal(request.to_dict())


def test_call_for_plain_request():
    call = create_embeddings_call(EmbeddingRequest())
    assert call.method == "POST"
    assert call.path == "/embeddings"
    assert call.body == {"input": None, "model": ""}
    assert call.extra_body is None


def test_call_moves_extra_body_out_of_payload():
    call = create_embeddings_call(
        EmbeddingRequest(extra_body={"input_type": "query", "truncate": "NONE"}, dimensions=1)
    )
    assert call.body == {"input": None, "model": "", "dimensions": 1}
    assert call.extra_body == {"input_type": "query", "truncate": "NONE"}


def test_call_with_unserialisable_input():
    with pytest.raises(TypeError):
        create_embeddings_call(EmbeddingRequest(input=object(), model="example_model"))


def test_call_for_azure_model():
    call = create_embeddings_call(EmbeddingRequest(model=EmbeddingModel.ADA_EMBEDDING_V2))
    assert call.model == "text-embedding-ada-002"


def test_strings_and_tokens_convert():
    strings = EmbeddingRequestStrings(input=TEXTS, model="m", user="u").convert()
    assert strings.input == TEXTS and strings.user == "u"
    tokens = EmbeddingRequestTokens(input=[[1, 2]], encoding_format=EmbeddingEncodingFormat.BASE64).convert()
    assert tokens.to_dict()["encoding_format"] == "base64"


@pytest.mark.parametrize(
    "request_obj",
    [EmbeddingRequest(), EmbeddingRequestStrings(), EmbeddingRequestTokens()],
)
def test_parse_float_response(request_obj):
    response = parse_embeddings_response(request_obj, _float_payload())
    assert [e.embedding for e in response.data] == SAMPLE_VECTORS


def test_parse_base64_response():
    response = parse_embeddings_response(
        EmbeddingRequest(encoding_format=EmbeddingEncodingFormat.BASE64), _base64_payload()
    )
    for got, want in zip(response.data, SAMPLE_VECTORS):
        assert got.embedding == pytest.approx(want, rel=1e-6)


def test_parse_base64_response_from_bytes():
    import json

    response = parse_embeddings_response(
        EmbeddingRequest(encoding_format="base64"), json.dumps(_base64_payload()).encode()
    )
    assert len(response.data) == 2


def test_to_embedding_response():
    response = EmbeddingResponseBase64(
        data=[Base64Embedding(embedding=e) for e in SAMPLE_BASE64]
    ).to_embedding_response()
    assert response.object == "" and response.model == ""
    assert len(response.data) == 2
    for got, want in zip(response.data, SAMPLE_VECTORS):
        assert got.embedding == pytest.approx(want, rel=1e-6)


def test_to_embedding_response_invalid():
    with pytest.raises(ValueError):
        EmbeddingResponseBase64(data=[Base64Embedding(embedding="----")]).to_embedding_response()


def test_decode_ignores_trailing_bytes():
    encoded = base64.b64encode(struct.pack("<f", 1.5) + b"\x00").decode()
    assert decode_base64_floats(encoded) == [1.5]


def test_response_from_dict_keeps_usage():
    response = EmbeddingResponse.from_dict(
        {"object": "list", "data": [], "model": "m", "usage": {"total_tokens": 3}}
    )
    assert response.usage == {"total_tokens": 3}
    assert response.object == "list"


def test_dot_product():
    assert Embedding(embedding=[1, 2, 3]).dot_product(Embedding(embedding=[2, 4, 6])) == pytest.approx(28.0)
    assert Embedding(embedding=[1, 0, 0]).dot_product(Embedding(embedding=[0, 1, 0])) == pytest.approx(0.0)


def test_dot_product_length_mismatch():
    with pytest.raises(VectorLengthMismatchError):
        Embedding(embedding=[1, 0, 0]).dot_product(Embedding(embedding=[0, 1]))