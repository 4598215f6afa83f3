from __future__ import annotations

import os
from collections.abc import Callable, Generator

import pytest

from app.config import AppSettings, GeneratorSettings, LayoutSettings
from domain.models import GeneratorConfig, ProcessFlow
from domain.services.generate_process_flow import generate_process_flow


def _clear_pflow_env() -> None:
    for key in list(os.environ):
        if key.startswith("PFLOW_"):
            os.environ.pop(key, None)


_clear_pflow_env()


@pytest.fixture(autouse=True)
def clear_pflow_env() -> Generator[None, None, None]:
    _clear_pflow_env()
    yield
    _clear_pflow_env()


@pytest.fixture
def layout_settings() -> LayoutSettings:
    return LayoutSettings(
        direction="TB",
        node_separation=32.0,
        rank_separation=56.0,
        node_width=240.0,
        node_height=96.0,
    )


@pytest.fixture
def app_settings_factory(layout_settings: LayoutSettings) -> Callable[..., AppSettings]:
    def _factory(**layout_overrides: object) -> AppSettings:
        return AppSettings(
            log_level="WARNING",
            generator=GeneratorSettings(max_nodes=10),
            layout=layout_settings.model_copy(update=layout_overrides),
        )

    return _factory


@pytest.fixture
def reference_flow() -> ProcessFlow:
    return generate_process_flow(GeneratorConfig(seed="abc", max_nodes=3))
