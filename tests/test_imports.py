"""Verify every module imports cleanly with no errors."""


def test_import_repochief_demo():
    import repochief_demo  # noqa: F401


def test_import_cli():
    import repochief_demo.cli  # noqa: F401


def test_import_config():
    import repochief_demo.config  # noqa: F401


def test_import_defaults():
    import repochief_demo.defaults  # noqa: F401


def test_import_e2e():
    import repochief_demo.e2e  # noqa: F401


def test_import_orchestrator():
    import repochief_demo.orchestrator  # noqa: F401


def test_import_recorder():
    import repochief_demo.recorder  # noqa: F401


def test_import_runner():
    import repochief_demo.runner  # noqa: F401


def test_import_scenarios():
    import repochief_demo.scenarios  # noqa: F401
