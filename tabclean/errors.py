class UnsupportedInput(ValueError):
    """The table has a shape the pipeline cannot work with (e.g. no columns)."""


class UnsupportedFormat(ValueError):
    """An uploaded file could not be turned into a table."""
