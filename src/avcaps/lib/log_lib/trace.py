"""
Function tracing decorator.

Routes trace output through the OutputManager singleton at TRACE level,
so it shows only when the log level is "trace" or a report file is
capturing trace-level diagnostics.
"""

import functools
import inspect

from . import levels


def _short_repr(value):
    if isinstance(value, str) and len(value) > 50:
        return f"'{value[:47]}...'"
    if isinstance(value, (list, tuple)) and len(value) > 3:
        return f"[...{len(value)} items...]"
    return repr(value)


def trace(func):
    """Decorator to trace function calls via the OutputManager.

    Shows function entry/exit with arguments and return values at
    TRACE level. Generators are traced on creation only.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        # Lazy import to avoid circular dependency
        from .manager import get_output

        out = get_output()
        module = inspect.getmodule(func)
        module_name = module.__name__ if module else "unknown"
        func_name = func.__name__

        args_repr = [_short_repr(arg) for arg in args]
        args_repr.extend(f"{key}={_short_repr(value)}"
                         for key, value in kwargs.items())

        out.emit(levels.TRACE, "[TRACE] >> {mod}.{fn}({args})",
                 mod=module_name, fn=func_name, args=', '.join(args_repr))
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            out.emit(levels.TRACE, "[TRACE] !! {mod}.{fn} raised: {exc}: {msg}",
                     mod=module_name, fn=func_name,
                     exc=type(e).__name__, msg=str(e))
            raise

        if result is not None:
            out.emit(levels.TRACE, "[TRACE] << {mod}.{fn} returned: {val}",
                     mod=module_name, fn=func_name, val=_short_repr(result))
        return result

    return wrapper
