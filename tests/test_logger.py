import threading

from wavify.utils import LogLevel, logger


def test_format_kv_escapes_and_formats():
    line = logger.format_kv({"file": 'a "b"\nc', "code": 1, "ok": True, "dst": None, "pct": 2.5})
    assert line == 'file="a \\"b\\"\\nc" | code=1 | ok=true | dst=null | pct=2.50'


def test_format_kv_clips_long_values():
    line = logger.format_kv({"error": "x" * 2000})
    assert len(line) < 600
    assert line.endswith('..."')


def test_log_respects_level(capsys):
    previous = logger.get_log_level()
    try:
        logger.set_log_level(LogLevel.WARN)
        logger.log("test.hidden", LogLevel.INFO, a=1)
        logger.log("test.shown", LogLevel.ERROR, a=1)
    finally:
        logger.set_log_level(previous)

    out = capsys.readouterr().out
    assert "test.hidden" not in out
    assert "[ERROR] | test.shown | a=1 | worker=main" in out


def test_worker_ids_are_stable_per_thread():
    ids = []

    def record():
        ids.append((logger.get_worker_id(), logger.get_worker_id()))

    t = threading.Thread(target=record)
    t.start()
    t.join()

    first, second = ids[0]
    assert first == second
    assert first.startswith("w")
    assert logger.get_worker_id() == "main"


def test_undecodable_text_is_escaped(capsys):
    name = "bad\udcff.mp3"
    assert logger.format_kv({"file": name}) == 'file="bad\\udcff.mp3"'

    logger.log("test.file", LogLevel.ERROR, file=name)
    logger.safe_print(f"FAILED: {name}")

    out = capsys.readouterr().out
    assert 'file="bad\\udcff.mp3"' in out
    assert "FAILED: bad\\udcff.mp3" in out
