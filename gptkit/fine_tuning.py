"""Fine-tune jobs: the legacy fine-tunes API and the fine-tuning jobs API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import urlencode

from gptkit.files import File
from gptkit.request_builder import ApiCall

# The /fine-tunes endpoints were retired in favour of /fine_tuning/jobs.


@dataclass
class FineTuneRequest:
    """Parameters of a legacy fine-tune request."""

    training_file: str = ""
    validation_file: str = ""
    model: str = ""
    epochs: int = 0
    batch_size: int = 0
    learning_rate_multiplier: float = 0.0
    prompt_loss_rate: float = 0.0
    compute_classification_metrics: bool = False
    classification_classes: int = 0
    classification_positive_class: str = ""
    classification_betas: list[float] = field(default_factory=list)
    suffix: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON payload, leaving out unset optional fields."""
        payload: dict[str, Any] = {"training_file": self.training_file}
        optional = {
            "validation_file": self.validation_file,
            "model": self.model,
            "n_epochs": self.epochs,
            "batch_size": self.batch_size,
            "learning_rate_multiplier": self.learning_rate_multiplier,
            "prompt_loss_rate": self.prompt_loss_rate,
            "compute_classification_metrics": self.compute_classification_metrics,
            "classification_n_classes": self.classification_classes,
            "classification_positive_class": self.classification_positive_class,
            "classification_betas": list(self.classification_betas),
            "suffix": self.suffix,
        }
        payload.update((key, value) for key, value in optional.items() if value)
        return payload


@dataclass
class FineTuneEvent:
    """One event in the life of a fine-tune."""

    object: str = ""
    created_at: int = 0
    level: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTuneEvent":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            level=data.get("level") or "",
            message=data.get("message") or "",
        )


@dataclass
class FineTuneHyperParams:
    """Hyperparameters a legacy fine-tune ran with."""

    batch_size: int = 0
    learning_rate_multiplier: float = 0.0
    epochs: int = 0
    prompt_loss_weight: float = 0.0

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any] | None) -> "FineTuneHyperParams":
        data = data or {}
        return cls(
            batch_size=data.get("batch_size") or 0,
            learning_rate_multiplier=float(data.get("learning_rate_multiplier") or 0.0),
            epochs=data.get("n_epochs") or 0,
            prompt_loss_weight=float(data.get("prompt_loss_weight") or 0.0),
        )


def _files(items: Any) -> list[File]:
    return [File.from_dict(item) for item in items or []]


@dataclass
class FineTune:
    """A legacy fine-tune."""

    id: str = ""
    object: str = ""
    model: str = ""
    created_at: int = 0
    events: list[FineTuneEvent] = field(default_factory=list)
    fine_tuned_model: str = ""
    hyperparams: FineTuneHyperParams = field(default_factory=FineTuneHyperParams)
    organization_id: str = ""
    result_files: list[File] = field(default_factory=list)
    status: str = ""
    validation_files: list[File] = field(default_factory=list)
    training_files: list[File] = field(default_factory=list)
    updated_at: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTune":
        """Build from a decoded JSON object."""
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            model=data.get("model") or "",
            created_at=data.get("created_at") or 0,
            events=[FineTuneEvent.from_dict(item) for item in data.get("events") or []],
            fine_tuned_model=data.get("fine_tuned_model") or "",
            hyperparams=FineTuneHyperParams._from_dict(data.get("hyperparams")),
            organization_id=data.get("organization_id") or "",
            result_files=_files(data.get("result_files")),
            status=data.get("status") or "",
            validation_files=_files(data.get("validation_files")),
            training_files=_files(data.get("training_files")),
            updated_at=data.get("updated_at") or 0,
        )


@dataclass
class FineTuneList:
    """A list of legacy fine-tunes."""

    object: str = ""
    data: list[FineTune] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTuneList":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            data=[FineTune.from_dict(item) for item in data.get("data") or []],
        )


@dataclass
class FineTuneEventList:
    """The events of a legacy fine-tune."""

    object: str = ""
    data: list[FineTuneEvent] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTuneEventList":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            data=[FineTuneEvent.from_dict(item) for item in data.get("data") or []],
        )


@dataclass
class FineTuneDeleteResponse:
    """The result of deleting a fine-tuned model."""

    id: str = ""
    object: str = ""
    deleted: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTuneDeleteResponse":
        """Build from a decoded JSON object."""
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            deleted=bool(data.get("deleted")),
        )


def create_fine_tune_call(request: FineTuneRequest) -> ApiCall:
    """Describe the API call that starts a legacy fine-tune."""
    return ApiCall("POST", "/fine-tunes", body=request.to_dict())


def cancel_fine_tune_call(fine_tune_id: str) -> ApiCall:
    """Describe the API call that cancels a legacy fine-tune."""
    return ApiCall("POST", f"/fine-tunes/{fine_tune_id}/cancel")


def list_fine_tunes_call() -> ApiCall:
    """Describe the API call that lists legacy fine-tunes."""
    return ApiCall("GET", "/fine-tunes")


def get_fine_tune_call(fine_tune_id: str) -> ApiCall:
    """Describe the API call that retrieves a legacy fine-tune."""
    return ApiCall("GET", f"/fine-tunes/{fine_tune_id}")


def delete_fine_tune_call(fine_tune_id: str) -> ApiCall:
    """Describe the API call that deletes a legacy fine-tune."""
    return ApiCall("DELETE", f"/fine-tunes/{fine_tune_id}")


def list_fine_tune_events_call(fine_tune_id: str) -> ApiCall:
    """Describe the API call that lists a legacy fine-tune's events."""
    return ApiCall("GET", f"/fine-tunes/{fine_tune_id}/events")


@dataclass
class Hyperparameters:
    """Hyperparameters of a fine-tuning job; each may be a number or "auto"."""

    epochs: Any = None
    learning_rate_multiplier: Any = None
    batch_size: Any = None

    def _to_dict(self) -> dict[str, Any]:
        fields = {
            "n_epochs": self.epochs,
            "learning_rate_multiplier": self.learning_rate_multiplier,
            "batch_size": self.batch_size,
        }
        return {key: value for key, value in fields.items() if value is not None}

    @classmethod
    def _from_dict(cls, data: Mapping[str, Any] | None) -> "Hyperparameters":
        data = data or {}
        return cls(
            epochs=data.get("n_epochs"),
            learning_rate_multiplier=data.get("learning_rate_multiplier"),
            batch_size=data.get("batch_size"),
        )


@dataclass
class FineTuningJob:
    """A fine-tuning job."""

    id: str = ""
    object: str = ""
    created_at: int = 0
    finished_at: int = 0
    model: str = ""
    fine_tuned_model: str = ""
    organization_id: str = ""
    status: str = ""
    hyperparameters: Hyperparameters = field(default_factory=Hyperparameters)
    training_file: str = ""
    validation_file: str = ""
    result_files: list[str] = field(default_factory=list)
    trained_tokens: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTuningJob":
        """Build from a decoded JSON object."""
        return cls(
            id=data.get("id") or "",
            object=data.get("object") or "",
            created_at=data.get("created_at") or 0,
            finished_at=data.get("finished_at") or 0,
            model=data.get("model") or "",
            fine_tuned_model=data.get("fine_tuned_model") or "",
            organization_id=data.get("organization_id") or "",
            status=data.get("status") or "",
            hyperparameters=Hyperparameters._from_dict(data.get("hyperparameters")),
            training_file=data.get("training_file") or "",
            validation_file=data.get("validation_file") or "",
            result_files=list(data.get("result_files") or []),
            trained_tokens=data.get("trained_tokens") or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        """The JSON object, leaving out an empty fine-tuned model and validation file."""
        payload: dict[str, Any] = {
            "id": self.id,
            "object": self.object,
            "created_at": self.created_at,
            "finished_at": self.finished_at,
            "model": self.model,
        }
        if self.fine_tuned_model:
            payload["fine_tuned_model"] = self.fine_tuned_model
        payload["organization_id"] = self.organization_id
        payload["status"] = self.status
        payload["hyperparameters"] = self.hyperparameters._to_dict()
        payload["training_file"] = self.training_file
        if self.validation_file:
            payload["validation_file"] = self.validation_file
        payload["result_files"] = list(self.result_files)
        payload["trained_tokens"] = self.trained_tokens
        return payload


@dataclass
class FineTuningJobRequest:
    """Parameters of a fine-tuning job request."""

    training_file: str = ""
    validation_file: str = ""
    model: str = ""
    hyperparameters: Hyperparameters | None = None
    suffix: str = ""

    def to_dict(self) -> dict[str, Any]:
        """The JSON payload, leaving out unset optional fields."""
        payload: dict[str, Any] = {"training_file": self.training_file}
        if self.validation_file:
            payload["validation_file"] = self.validation_file
        if self.model:
            payload["model"] = self.model
        if self.hyperparameters is not None:
            payload["hyperparameters"] = self.hyperparameters._to_dict()
        if self.suffix:
            payload["suffix"] = self.suffix
        return payload


@dataclass
class FineTuningJobEvent:
    """One event of a fine-tuning job."""

    object: str = ""
    id: str = ""
    created_at: int = 0
    level: str = ""
    message: str = ""
    data: Any = None
    type: str = ""


@dataclass
class FineTuningJobEventList:
    """A page of fine-tuning job events."""

    object: str = ""
    data: list[FineTuneEvent] = field(default_factory=list)
    has_more: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FineTuningJobEventList":
        """Build from a decoded JSON object."""
        return cls(
            object=data.get("object") or "",
            data=[FineTuneEvent.from_dict(item) for item in data.get("data") or []],
            has_more=bool(data.get("has_more")),
        )


def create_fine_tuning_job_call(request: FineTuningJobRequest) -> ApiCall:
    """Describe the API call that creates a fine-tuning job."""
    return ApiCall("POST", "/fine_tuning/jobs", body=request.to_dict())


def cancel_fine_tuning_job_call(job_id: str) -> ApiCall:
    """Describe the API call that cancels a fine-tuning job."""
    return ApiCall("POST", f"/fine_tuning/jobs/{job_id}/cancel")


def retrieve_fine_tuning_job_call(job_id: str) -> ApiCall:
    """Describe the API call that retrieves a fine-tuning job."""
    return ApiCall("GET", f"/fine_tuning/jobs/{job_id}")


def list_fine_tuning_job_events_call(job_id: str, after: str | None = None, limit: int | None = None) -> ApiCall:
    """Describe the API call that lists a job's events, optionally paged."""
    params: dict[str, str] = {}
    if after is not None:
        params["after"] = after
    if limit is not None:
        params["limit"] = str(int(limit))
    query = "?" + urlencode(sorted(params.items())) if params else ""
    return ApiCall("GET", f"/fine_tuning/jobs/{job_id}/events{query}")