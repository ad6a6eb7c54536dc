"""Exception types raised by subpixreg."""


class ShapeMismatchError(ValueError):
    """Source and target arrays do not share a shape."""


class InvalidArgumentError(ValueError):
    """An argument is outside its valid domain (upsample factor, shift, axis, index)."""
