from __future__ import annotations

import pytest

from delve.environment.generators.pipeline.factory import Algorithm


@pytest.fixture(params=list(Algorithm), ids=lambda algorithm: algorithm.value)
def algorithm(request: pytest.FixtureRequest) -> Algorithm:
    """Every generation algorithm, one test run each."""
    return request.param
