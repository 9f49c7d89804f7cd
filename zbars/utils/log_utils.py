import logging


def configure_logging(debug: bool = False) -> None:
    """
    Configure the root logger with the package's standard format.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )
