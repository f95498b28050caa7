# gptkit

Building blocks for talking to OpenAI-compatible HTTP APIs. The package holds
client configuration, typed request and response models, error types,
multipart form encoding and a request builder. It uses only the standard
library.

## What this package does not do

gptkit never opens a connection. It has no client object that sends requests,
no retries, no authentication headers and no streaming reader. Each `*_call`
function returns a `gptkit.request_builder.ApiCall` that describes one
request: its `method`, its `path` suffix, the `model`, the `body`, any
`extra_body`, a `content_type` and a `raw_response` flag. You send that
request with an HTTP client of your choice and parse the reply with the
models described below.

## Installation

```
pip install gptkit
```

## Configuration

```python
from gptkit.config import default_config, default_azure_config, default_anthropic_config

config = default_config("token")
str(config)                                      # "<OpenAI API ClientConfig>"

azure = default_azure_config("placeholder", "https://example.com/")
azure.azure_deployment_by_model("gpt-3.5-turbo") # "gpt-35-turbo"

anthropic = default_anthropic_config("placeholder", "")
anthropic.base_url                               # "https://api.anthropic.com/v1"
```

`ClientConfig` is a dataclass with these fields: `auth_token`, `base_url`,
`org_id`, `api_type` (an `APIType`), `api_version`, `assistant_version`,
`azure_model_mapper`, `http_client` and `empty_messages_limit`, which
defaults to 300. The Azure preset removes `.` and `:` from model names to
form deployment names. Set `azure_model_mapper` to map them some other way.

## Describing requests

```python
from gptkit.completion import CompletionRequest, create_completion_call

call = create_completion_call(
    CompletionRequest(model="babbage-002", prompt="Lorem ipsum", max_tokens=5)
)
call.method, call.path, call.body
# ("POST", "/completions", {"model": "babbage-002", "prompt": "Lorem ipsum", "max_tokens": 5})
```

Before it describes the call, `create_completion_call` checks the request.
It raises these errors from `gptkit.errors`:

- `CompletionStreamNotSupportedError` if `stream` is set;
- `CompletionUnsupportedModelError` if the model is a chat-only model (see
  `endpoint_supports_model`);
- `CompletionPromptTypeError` if the prompt is neither a string nor a list
  of strings (see `is_supported_prompt`).

The other endpoints work the same way:

- `gptkit.embeddings`: `create_embeddings_call` takes an `EmbeddingRequest`,
  an `EmbeddingRequestStrings` or an `EmbeddingRequestTokens`.
  `parse_embeddings_response` parses the reply and decodes base64 vectors
  when the request asked for them.
- `gptkit.images`: `create_image_call`, `create_edit_image_call` and
  `create_vari_image_call`. Use `wrap_reader` to give an upload a file name
  and a content type.
- `gptkit.files`: `create_file_call` uploads from a local path and raises
  `FileNotFoundError` if the path does not exist. The module also has
  `create_file_bytes_call`, `list_files_call`, `get_file_call`,
  `get_file_content_call` (marked `raw_response`) and `delete_file_call`.
- `gptkit.fine_tuning`: the legacy fine-tunes calls (`create_fine_tune_call`,
  `cancel_fine_tune_call`, `list_fine_tunes_call`, `get_fine_tune_call`,
  `delete_fine_tune_call`, `list_fine_tune_events_call`) and the
  fine-tuning job calls (`create_fine_tuning_job_call`,
  `cancel_fine_tuning_job_call`, `retrieve_fine_tuning_job_call`,
  `list_fine_tuning_job_events_call` with optional `after` and `limit`).
- `gptkit.legacy`: `edits_call`, `list_engines_call` and `get_engine_call`.

The multipart calls accept an optional `builder` factory. It is called with
the body stream and must return an object with the `FormBuilder` methods.

## Building HTTP requests

`gptkit.request_builder.RequestBuilder.build(method, url, body, headers)`
returns an `HTTPRequest`. A `bytes` body or a readable body is sent unchanged.
Any other body is encoded as compact JSON by `JSONMarshaller`, and objects
with a `to_dict` method are encoded through it. `JSONUnmarshaler` decodes JSON
and raises `ValueError` on empty or malformed input.

`gptkit.form_builder.FormBuilder` writes multipart/form-data to a binary
stream. Its methods are `write_field`, `create_form_file`,
`create_form_file_reader`, `close` and `form_data_content_type`. It can also
be used as a context manager, which closes the form on a clean exit.

## Responses and errors

Response models, for example `CompletionResponse`, `EmbeddingResponse`,
`ImageResponse`, `FilesList`, `FineTuningJob` and `EnginesList`, are built
from decoded JSON with their `from_dict` class methods.

Error bodies are parsed with `ErrorResponse.from_json` or
`APIError.from_json`. The result is an `APIError` that carries the
`message`, `type`, `param`, `code` and, for Azure, an `inner_error` holding
the content-filter result. A message sent as a list of strings is joined
with `", "`. Malformed error bodies raise `ValueError`. `RequestError`
represents a failed request whose body held no API error.

`EmbeddingResponseBase64.to_embedding_response` decodes base64
little-endian float32 vectors. `Embedding.dot_product` raises
`VectorLengthMismatchError` when the two lengths differ.

`gptkit.error_accumulator.ErrorAccumulator` collects error bytes written to
it. If its buffer refuses a write, it raises `ErrorAccumulatorWriteError`.

## Running the tests

```
pip install -e ".[test]"
pytest
```