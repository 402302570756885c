# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

import pytest

from agents.supervisors.travel.graph import build_local_orchestrator
from tests.fakes import FakeGenerator, make_form


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def orchestrator(generator):
    return build_local_orchestrator(generator)


@pytest.fixture
def form():
    return make_form()
