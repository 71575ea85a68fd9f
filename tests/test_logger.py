import logging

from census.logger import PROJECT_LOGGER, get_logger, set_level


def test_loggers_share_project_handler():
    project = logging.getLogger(PROJECT_LOGGER)
    get_logger("census.router")
    get_logger("app.api")
    assert len(project.handlers) == 1
    assert project.propagate is False
    assert get_logger("app.api").name == "census.app.api"
    assert get_logger("census.pipeline").name == "census.pipeline"


def test_set_level_by_name():
    child = get_logger("census.extractors")
    set_level("debug", "census.extractors")
    assert child.level == logging.DEBUG
    set_level(logging.NOTSET, "census.extractors")
    assert child.level == logging.NOTSET
