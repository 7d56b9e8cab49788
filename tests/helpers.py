from datetime import datetime

from kungfu import Error, Ok

NOW = datetime(2026, 6, 15, 12, 0, 0)


def ok(result):
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise AssertionError(f"expected Ok, got Error({e!r})")
    raise AssertionError(f"not a result: {result!r}")


def err(result):
    match result:
        case Error(e):
            return e
        case Ok(value):
            raise AssertionError(f"expected Error, got Ok({value!r})")
    raise AssertionError(f"not a result: {result!r}")
