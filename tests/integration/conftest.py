"""Shared fixtures for end-to-end collector tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from packages.fleetwatch_shared.config import FleetwatchSettings
from tests.integration.helpers import SHARED_SECRET


@pytest.fixture
def collector_settings(tmp_path: Path) -> Callable[..., FleetwatchSettings]:
    """Return a factory for settings over a temp database and given endpoints."""

    def build(*endpoints: dict[str, str]) -> FleetwatchSettings:
        return FleetwatchSettings.model_validate(
            {
                "profile": {"ingest_shared_secret": SHARED_SECRET},
                "components": {
                    "substrate": {"sqlite": {"path": str(tmp_path / "fleet.db")}},
                    "adapter": {"inference": {"endpoints": list(endpoints)}},
                },
            }
        )

    return build
