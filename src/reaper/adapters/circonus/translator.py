"""Translate between Circonus payloads and domain types."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reaper.domain.model import BundleMetric, CheckBundle, CheckBundleMetrics, MetricSearchHit

if TYPE_CHECKING:
    from .schema import (
        CheckBundleMetricsPayload,
        CheckBundlePayload,
        CirconusBaseModel,
        MetricPayload,
        MetricSearchPayload,
    )


def _extras(payload: CirconusBaseModel) -> dict[str, object]:
    return dict(payload.model_extra or {})


def parse_metric(payload: MetricPayload) -> BundleMetric:
    return BundleMetric(name=payload.name, status=payload.status, attributes=_extras(payload))


def parse_check_bundle(payload: CheckBundlePayload) -> CheckBundle:
    return CheckBundle(
        cid=payload.cid,
        target=payload.target,
        metrics=[parse_metric(metric) for metric in payload.metrics],
        attributes=_extras(payload),
    )


def parse_check_bundle_metrics(payload: CheckBundleMetricsPayload) -> CheckBundleMetrics:
    return CheckBundleMetrics(
        cid=payload.cid,
        metrics=[parse_metric(metric) for metric in payload.metrics],
    )


def parse_metric_search_hit(payload: MetricSearchPayload) -> MetricSearchHit:
    return MetricSearchHit(
        cid=payload.cid,
        check_bundle_cid=payload.check_bundle_cid,
        metric_name=payload.metric_name,
    )


def dump_metric(metric: BundleMetric) -> dict[str, object]:
    return {**metric.attributes, "name": metric.name, "status": str(metric.status)}


def dump_check_bundle(bundle: CheckBundle) -> dict[str, object]:
    return {
        **bundle.attributes,
        "_cid": bundle.cid,
        "target": bundle.target,
        "metrics": [dump_metric(metric) for metric in bundle.metrics],
    }


def dump_check_bundle_metrics(bundle_metrics: CheckBundleMetrics) -> dict[str, object]:
    return {
        "_cid": bundle_metrics.cid,
        "metrics": [dump_metric(metric) for metric in bundle_metrics.metrics],
    }
