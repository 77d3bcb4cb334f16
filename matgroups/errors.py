"""Error kinds raised while recognizing finite matrix groups

Copyright 2023 The matgroups Authors.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""


class RecognitionError(ValueError):
    """Base class for errors that say something about the input matrices."""


class InvalidInputError(RecognitionError):
    """The input matrices are not a valid (nonempty, square, invertible, ...) generating set."""


class GroupInfiniteError(RecognitionError):
    """The input matrices generate an infinite group."""


class ModulusSearchExhaustedError(RuntimeError):
    """No good prime was found below a user-imposed cap on the search."""
