import logging
from pathlib import Path
from typing import Optional, get_type_hints

from inventory_tracker.logger import setup_logger


def test_name_and_log_dir_are_optional():
    hints = get_type_hints(setup_logger)

    assert hints["name"] == Optional[str]
    assert hints["log_dir"] == Optional[Path]


def test_level_is_applied_to_the_named_logger(tmp_path):
    logger = setup_logger("inventory_tracker.tests", log_level="WARNING", log_dir=tmp_path)

    assert logger.name == "inventory_tracker.tests"
    assert logger.level == logging.WARNING
