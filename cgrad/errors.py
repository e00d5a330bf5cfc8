"""Exception hierarchy raised by the library."""


class CGradError(Exception):
    """Base class of every error the library raises."""


class ShapeError(CGradError, ValueError):
    """A tensor has a shape that does not suit the operation."""


class DTypeError(CGradError, TypeError):
    """A tensor has a data type that the operation does not support."""


class CapacityError(CGradError):
    """A fixed-capacity container or memory limit was exceeded."""


class AutogradError(CGradError):
    """The computational graph or backpropagation failed."""


class DatasetError(CGradError):
    """A dataset could not be loaded or sampled."""