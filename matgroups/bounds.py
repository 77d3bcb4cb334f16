"""Upper bounds on the orders of finite linear groups over the rationals

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

The values for n <= 10 are those of W. Feit, "The orders of finite linear groups" (preprint, 1995),
as tabulated at https://mathoverflow.net/questions/168292 and in [BDEPS04].  For n > 10 the order of
the hyperoctahedral group, 2^n * n!, is the maximum.
"""

from __future__ import annotations

import math

# MAXIMAL_ORDERS[n - 1] is the largest order of a finite subgroup of GL(n, Z)
MAXIMAL_ORDERS = (
    2,
    12,
    48,
    1152,
    3840,
    103680,
    2903040,
    696729600,
    1393459200,
    8360755200,
)


def maximal_order_of_finite_linear_group(dimension: int) -> int:
    """Largest possible order of a finite subgroup of GL(dimension, Q).

    Every finite subgroup of GL(n, Q) is conjugate to a subgroup of GL(n, Z), so this is also the
    largest order of a finite subgroup of GL(n, Z).  A finite group of matrices over a number field
    K of degree d over Q embeds into GL(d * n, Q), which is how the bound is applied to K.
    """
    if dimension < 1:
        raise ValueError(f"Linear groups must have dimension >= 1 (provided: {dimension})")
    if dimension <= len(MAXIMAL_ORDERS):
        return MAXIMAL_ORDERS[dimension - 1]
    return math.factorial(dimension) << dimension
