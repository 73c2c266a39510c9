from pychip8.utils import debug


def _enable(monkeypatch, value: str) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", value)
    debug.reload_categories()


def test_debug_disabled_by_default(capsys):
    assert not debug.debug_enabled("cpu")
    debug.debug_log("cpu", "pc=%03x", 0x200)
    assert capsys.readouterr().out == ""


def test_debug_categories_are_selective(monkeypatch, capsys):
    _enable(monkeypatch, "cpu, Input")

    assert debug.debug_enabled("cpu")
    assert debug.debug_enabled("input")
    assert not debug.debug_enabled("audio")

    debug.debug_log("cpu", "pc=%03x word=%04x", 0x200, 0x00E0)
    debug.debug_log("audio", "ignored")
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200 word=00e0\n"


def test_debug_all_enables_everything(monkeypatch):
    _enable(monkeypatch, "all")

    assert debug.debug_enabled("perf")
    assert debug.debug_enabled()


def test_debug_log_survives_bad_format(monkeypatch, capsys):
    _enable(monkeypatch, "cpu")

    debug.debug_log("cpu", "value=%d", "not-a-number")
    assert capsys.readouterr().out == "[CHIP8][cpu] value=%d ('not-a-number',)\n"


def test_enabled_categories_is_cached_until_reload(monkeypatch):
    _enable(monkeypatch, "cpu,,perf")
    assert debug.enabled_categories() == frozenset({"cpu", "perf"})

    monkeypatch.setenv("CHIP8_DEBUG", "audio")
    assert debug.enabled_categories() == frozenset({"cpu", "perf"})

    debug.reload_categories()
    assert debug.enabled_categories() == frozenset({"audio"})
