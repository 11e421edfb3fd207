class AnscapesError(Exception):
    """Base class for every error raised by anscapes."""


class InvalidConfigurationError(AnscapesError, ValueError):
    """Renderer configured with non-positive dimensions or a negative bias."""


class InvalidInputError(AnscapesError, ValueError):
    """A render call received pixel data or a sink it cannot use."""


class InvalidArgumentError(AnscapesError, ValueError):
    """A parametrised escape builder received an out-of-range argument."""
