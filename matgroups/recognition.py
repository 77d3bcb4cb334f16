"""Deciding finiteness of matrix groups over the rationals and number fields

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

Following Detinko, Flannery, and O'Brien, "Recognizing finite matrix groups over infinite fields"
(Section 4.2), a group G generated by matrices over the rationals or a number field K is
recognized as follows.
1. Reduce the generators modulo a suitable prime, which yields a group H over a finite field.
2. Compare the order of H to the largest order of a finite subgroup of GL(n * [K:Q], Q).
3. Compute a presentation of H on the reduced generators.
4. Check that the relators of this presentation are satisfied by the original generators.
If the relators are satisfied, then the reduction map G --> H is an isomorphism.  Otherwise (or
if H is too large) the reduction map is not injective, in which case G is infinite.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Sequence

from sympy.polys.domains.domain import Domain

from matgroups import bounds, fields, modulus
from matgroups.errors import GroupInfiniteError, RecognitionError
from matgroups.groups import (
    FiniteMatrixGroup,
    GroupEngine,
    NativeGroupEngine,
    extend_generators,
    is_identity,
)


@dataclasses.dataclass(frozen=True)
class Ok:
    """A successfully recognized finite group."""

    group: FiniteMatrixGroup


@dataclasses.dataclass(frozen=True)
class Err:
    """A failure to recognize a finite group: the group is infinite, or the input is invalid."""

    error: RecognitionError


RecognitionResult = typing.Union[Ok, Err]


def isomorphic_group_over_finite_field(
    matrices: Sequence[fields.MatrixLike],
    *,
    field: Domain | None = None,
    start: int = modulus.DEFAULT_START_PRIME,
    engine: GroupEngine | None = None,
    max_prime: int | None = None,
) -> FiniteMatrixGroup:
    """Find a group over a finite field that is isomorphic to the group generated by the matrices.

    The generators of the returned group are the reductions of the given matrices, in the same
    order.

    Args:
        matrices: Invertible square matrices of equal size over the rationals or a number field.
        field: The field of matrix entries, as a SymPy domain.  If None, infer it from the entries.
        start: Search for a suitable prime strictly above this number.
        engine: Engine used to compute group orders and presentations.  Defaults to the native one.
        max_prime: Optional upper limit for the prime search.

    Returns:
        A FiniteMatrixGroup that knows its order and the residue field of the reduction.

    Raises:
        InvalidInputError: If the matrices are not valid generators.
        GroupInfiniteError: If the matrices generate an infinite group.
        ModulusSearchExhaustedError: If no suitable prime <= max_prime was found.
    """
    engine = engine or NativeGroupEngine()
    matrices_K = fields.as_domain_matrices(matrices, field)
    domain = matrices_K[0].domain
    dimension = matrices_K[0].shape[0]

    reduction = modulus.select_modulus(matrices_K, start, max_prime=max_prime)
    group = FiniteMatrixGroup(*reduction.matrices, residue_field=reduction.residue_field)
    order = engine.order(group)

    bound = bounds.maximal_order_of_finite_linear_group(fields.degree(domain) * dimension)
    if order > bound:
        raise GroupInfiniteError(
            f"Group is not finite: its reduction modulo {reduction.prime} has order {order}, which"
            f" exceeds the largest order of a finite linear group of this degree ({bound})"
        )

    group = FiniteMatrixGroup(
        *reduction.matrices, order=order, residue_field=reduction.residue_field
    )
    presentation = engine.presentation(group)
    generators = extend_generators(presentation, matrices_K)
    inverses = [generator.inv() for generator in generators]
    for relator in presentation.relators:
        if not is_identity(engine.evaluate_word(relator, generators, inverses=inverses)):
            raise GroupInfiniteError(
                f"Group is not finite: its reduction modulo {reduction.prime} is not injective"
            )

    return group


def recognize(
    matrices: Sequence[fields.MatrixLike],
    *,
    field: Domain | None = None,
    start: int = modulus.DEFAULT_START_PRIME,
    engine: GroupEngine | None = None,
    max_prime: int | None = None,
) -> RecognitionResult:
    """Decide whether matrices generate a finite group.

    Return Ok(group) with a certified isomorphic group over a finite field if the matrices
    generate a finite group, and Err(error) if they generate an infinite group or are not valid
    generators.
    Arguments are as in isomorphic_group_over_finite_field.
    """
    try:
        group = isomorphic_group_over_finite_field(
            matrices, field=field, start=start, engine=engine, max_prime=max_prime
        )
    except RecognitionError as error:
        return Err(error)
    return Ok(group)


def is_finite(
    matrices: Sequence[fields.MatrixLike],
    *,
    field: Domain | None = None,
    start: int = modulus.DEFAULT_START_PRIME,
    engine: GroupEngine | None = None,
    max_prime: int | None = None,
) -> bool:
    """Do the given matrices generate a finite group?

    Arguments are as in isomorphic_group_over_finite_field.  Raise an InvalidInputError if the
    matrices are not valid generators.
    """
    result = recognize(matrices, field=field, start=start, engine=engine, max_prime=max_prime)
    if isinstance(result, Err) and not isinstance(result.error, GroupInfiniteError):
        raise result.error
    return isinstance(result, Ok)
