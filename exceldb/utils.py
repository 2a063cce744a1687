import logging


def format_number(value):
    """Render a number the way a header cell shows it: 5.0 -> "5", 2.5 -> "2.5"."""
    try:
        value = float(value)
    except (ValueError, TypeError):
        return str(value)

    if value.is_integer():
        return str(int(value))
    else:
        return repr(value)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
