from task_process import Logger


def test_logs_to_named_file_with_indentation(tmp_path):
    logger = Logger(log_dir=str(tmp_path), log_name="run", level="INFO")
    logger.info("task start")
    with logger.indent():
        logger.info("step output")
        with logger.indent():
            logger.warning("line one\nline two")
    logger.info("task end")

    content = logger.get_log_file().read_text(encoding="utf-8")
    assert logger.get_log_file() == tmp_path / "run.log"
    assert "] task start" in content
    assert "]   step output" in content
    assert "]     line one" in content
    assert "    line two" in content
    assert "] task end" in content


def test_debug_is_filtered_until_level_changes(tmp_path):
    logger = Logger(log_dir=str(tmp_path), log_name="levels.log")
    logger.debug("hidden")
    logger.set_level("DEBUG")
    logger.debug("visible")

    content = logger.get_log_file().read_text(encoding="utf-8")
    assert "hidden" not in content
    assert "visible" in content


def test_console_only_logger_has_no_file():
    logger = Logger(log_dir=None)
    logger.info("console only")
    assert logger.get_log_file() is None


def test_default_log_name_is_timestamped(tmp_path):
    logger = Logger(log_dir=str(tmp_path))
    assert logger.get_log_file().name.startswith("task_process_")
    assert logger.get_log_file().suffix == ".log"
