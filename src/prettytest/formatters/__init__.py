from prettytest.formatters.base import Formatter
from prettytest.formatters.bdd import BDDFormatter
from prettytest.formatters.tdd import TDDFormatter

_FORMATTERS: dict[str, type[Formatter]] = {
    "tdd": TDDFormatter,
    "bdd": BDDFormatter,
}


def get_formatter(formatter_name: str, **kwargs) -> Formatter:
    cls = _FORMATTERS.get(formatter_name)
    if cls is None:
        raise ValueError(
            f"Unknown formatter: {formatter_name!r}. "
            f"Available: {', '.join(sorted(_FORMATTERS))}"
        )
    return cls(**kwargs)


__all__ = [
    "BDDFormatter",
    "Formatter",
    "TDDFormatter",
    "get_formatter",
]
