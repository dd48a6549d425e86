from __future__ import annotations

import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, cast

import boto3
from botocore.config import Config


@dataclass(frozen=True)
class AwsCallMetric:
    service: str
    operation: str
    seconds: float
    ok: bool


@dataclass(frozen=True)
class ClientSettings:
    region: str | None = None
    endpoint_url: str | None = None
    connect_timeout: float = 1.0
    read_timeout: float = 3.0
    max_attempts: int = 3

    @staticmethod
    def from_env(environ: Mapping[str, str] = os.environ) -> ClientSettings:
        defaults = ClientSettings()
        return ClientSettings(
            region=(environ.get("DYNAMAP_REGION") or environ.get("AWS_REGION") or "").strip() or None,
            endpoint_url=(environ.get("DYNAMAP_ENDPOINT_URL") or "").strip() or None,
            connect_timeout=_env_number(
                environ, "DYNAMAP_CONNECT_TIMEOUT", float, defaults.connect_timeout
            ),
            read_timeout=_env_number(environ, "DYNAMAP_READ_TIMEOUT", float, defaults.read_timeout),
            max_attempts=_env_number(environ, "DYNAMAP_MAX_ATTEMPTS", int, defaults.max_attempts),
        )


def _env_number[N: (int, float)](
    environ: Mapping[str, str], name: str, parse: Callable[[str], N], default: N
) -> N:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = parse(raw)
    except ValueError as err:
        raise ValueError(f"{name} must be a number, got {raw!r}") from err
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


def create_boto3_config(settings: ClientSettings | None = None) -> Config:
    settings = settings or ClientSettings()
    return Config(
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
        retries={"max_attempts": settings.max_attempts, "mode": "adaptive"},
    )


class _InstrumentedClient:
    def __init__(self, client: Any, service: str, on_call: Callable[[AwsCallMetric], None]) -> None:
        self._client = client
        self._service = service
        self._on_call = on_call

    def __getattr__(self, name: str) -> Any:
        attr = getattr(self._client, name)
        if name.startswith("_") or not callable(attr):
            return attr

        def wrapped(*args: Any, **kwargs: Any) -> Any:
            start = time.monotonic()
            ok = False
            try:
                out = attr(*args, **kwargs)
                ok = True
                return out
            finally:
                self._on_call(
                    AwsCallMetric(
                        service=self._service,
                        operation=name,
                        seconds=time.monotonic() - start,
                        ok=ok,
                    )
                )

        return wrapped


def instrument_boto3_client(
    client: Any,
    *,
    service: str,
    on_call: Callable[[AwsCallMetric], None],
) -> Any:
    return _InstrumentedClient(client, service, on_call)


def create_dynamodb_client(
    settings: ClientSettings | None = None,
    *,
    session: Any | None = None,
    metrics: Callable[[AwsCallMetric], None] | None = None,
) -> Any:
    settings = settings or ClientSettings.from_env()
    sess = session or boto3.session.Session(region_name=settings.region)

    kwargs: dict[str, Any] = {"config": create_boto3_config(settings)}
    if settings.region is not None:
        kwargs["region_name"] = settings.region
    if settings.endpoint_url is not None:
        kwargs["endpoint_url"] = settings.endpoint_url

    client = cast(Any, sess).client("dynamodb", **kwargs)
    if metrics is not None:
        client = instrument_boto3_client(client, service="dynamodb", on_call=metrics)
    return client
