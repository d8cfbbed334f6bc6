"""Field projection over summary and detail records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from jobsuche_core.models.fields import FieldSpec
from jobsuche_core.models.job import JobDetail, JobSummary
from jobsuche_core.models.report import BatchReport, ExpandedSearchReport, SearchOutcome

Record = Mapping[str, Any] | BaseModel
Projectable = SearchOutcome | ExpandedSearchReport | BatchReport | JobSummary | JobDetail


def project(record: Record, spec: FieldSpec | None) -> dict[str, Any]:
    """Return a copy of ``record`` reduced to the fields ``spec`` selects.

    Unknown field names are ignored. The source record is never mutated.
    """
    data = record.model_dump(mode="json") if isinstance(record, BaseModel) else dict(record)
    if spec is None:
        return data
    spec.ensure_exclusive()
    if spec.include_fields is not None:
        wanted = set(spec.include_fields)
        return {k: v for k, v in data.items() if k in wanted}
    if spec.exclude_fields is not None:
        unwanted = set(spec.exclude_fields)
        return {k: v for k, v in data.items() if k not in unwanted}
    return data


def project_report(value: Projectable, spec: FieldSpec | None) -> dict[str, Any]:
    """Serialize a report, projecting every summary and detail record inside it."""
    if spec is not None:
        spec.ensure_exclusive()
    if isinstance(value, (JobSummary, JobDetail)):
        return project(value, spec)
    data = value.model_dump(mode="json")
    if isinstance(value, SearchOutcome):
        return _project_search(data, spec)
    if isinstance(value, ExpandedSearchReport):
        return _project_expanded(data, spec)
    for entry in data["results"]:
        if entry["status"] == "ok":
            entry["report"] = _project_expanded(entry["report"], spec)
    return data


def _project_search(data: dict[str, Any], spec: FieldSpec | None) -> dict[str, Any]:
    data["jobs"] = [project(job, spec) for job in data["jobs"]]
    return data


def _project_expanded(data: dict[str, Any], spec: FieldSpec | None) -> dict[str, Any]:
    data["search"] = _project_search(data["search"], spec)
    for outcome in data["details"]:
        if outcome["status"] == "ok":
            outcome["job"] = project(outcome["job"], spec)
    return data
