import importlib.metadata

from . import bounds, errors, external, fields, groups, modulus, recognition
from .errors import (
    GroupInfiniteError,
    InvalidInputError,
    ModulusSearchExhaustedError,
    RecognitionError,
)
from .groups import FiniteMatrixGroup, GroupEngine, NativeGroupEngine, Presentation
from .recognition import Err, Ok, is_finite, isomorphic_group_over_finite_field, recognize

__version__ = importlib.metadata.version("matgroups")

__all__ = [
    "__version__",
    "bounds",
    "errors",
    "external",
    "fields",
    "groups",
    "modulus",
    "recognition",
    "Err",
    "FiniteMatrixGroup",
    "GroupEngine",
    "GroupInfiniteError",
    "InvalidInputError",
    "ModulusSearchExhaustedError",
    "NativeGroupEngine",
    "Ok",
    "Presentation",
    "RecognitionError",
    "is_finite",
    "isomorphic_group_over_finite_field",
    "recognize",
]
