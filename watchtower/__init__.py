from watchtower.aggregate import aggregate, failures, should_notify
from watchtower.fanout import run_all
from watchtower.models import CheckOutcome, ErrorKind, RunSummary, Target
from watchtower.notify import DeliveryFailed, NotifyError, SinkUnconfigured, WebhookConfig, notify
from watchtower.probe import probe
from watchtower.report import render, render_json

__all__ = [
    "CheckOutcome",
    "DeliveryFailed",
    "ErrorKind",
    "NotifyError",
    "RunSummary",
    "SinkUnconfigured",
    "Target",
    "WebhookConfig",
    "aggregate",
    "failures",
    "notify",
    "probe",
    "render",
    "render_json",
    "run_all",
    "should_notify",
]
