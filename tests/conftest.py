from pathlib import Path

import pytest
from loguru import logger

from instrument import Control, ControlContext
from sample_controls import SAMPLE_CONTROLS

CONTROL_TEMPLATES_PATH = Path(__file__).parent / "control_templates"


@pytest.fixture
def control_context(monkeypatch):
    """Isolated context with the sample controls and the fixture templates installed on Control."""
    context = ControlContext(search_path=[CONTROL_TEMPLATES_PATH])
    for control_class in SAMPLE_CONTROLS:
        context.register(control_class)

    monkeypatch.setattr(Control, "context", context)
    return context


@pytest.fixture
def log_messages():
    """Collect instrument log messages at DEBUG and above."""
    messages = []
    logger.enable("instrument")
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)
    logger.disable("instrument")
