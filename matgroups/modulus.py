"""Choosing a prime modulo which matrices over the rationals or a number field reduce faithfully

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

Detinko, Flannery, and O'Brien, "Recognizing finite matrix groups over infinite fields"
(Sections 3.1 and 3.2), show that reduction modulo an odd prime p that divides neither a
denominator of the matrices and their inverses nor (for a number field) the discriminant of
the defining polynomial is either an isomorphism onto its image, or not injective, in which
case the group generated by the matrices is infinite.

!!! WARNING !!!

Only the denominators of the given matrices are checked, not those of their inverses.  Instead, the
reduced matrices are checked to be invertible, which catches primes at which a matrix degenerates.
"""

from __future__ import annotations

import dataclasses
import warnings
from collections.abc import Sequence

import galois
import numpy as np
from sympy.polys.matrices import DomainMatrix

from matgroups import fields
from matgroups.errors import ModulusSearchExhaustedError

DEFAULT_START_PRIME = 2


@dataclasses.dataclass(frozen=True, eq=False)
class Reduction:
    """Matrices reduced into the residue field of a prime (ideal)."""

    residue_field: fields.ResidueField
    matrices: tuple[galois.FieldArray, ...]

    @property
    def prime(self) -> int:
        """The rational prime below the residue field."""
        return self.residue_field.prime


def validate_modulus(matrices: Sequence[DomainMatrix], prime: int) -> Reduction | None:
    """Reduce matrices modulo a prime, or return None if the prime is not suitable."""
    assert matrices
    if fields.is_number_field(matrices[0].domain):
        return validate_number_field_modulus(matrices, prime)
    return validate_rational_modulus(matrices, prime)


def validate_rational_modulus(matrices: Sequence[DomainMatrix], prime: int) -> Reduction | None:
    """Reduce rational matrices modulo a prime, or return None if the prime is not suitable."""
    if prime == 2 or _divides_a_denominator(matrices, prime):
        return None
    return _reduce_invertible(matrices, fields.ResidueField.prime_field(prime))


def validate_number_field_modulus(
    matrices: Sequence[DomainMatrix], prime: int
) -> Reduction | None:
    """Reduce matrices over a number field modulo a prime ideal above the given rational prime.

    Return None if the prime is not suitable.  If the prime splits into several prime ideals, the
    first one returned by fields.residue_fields_above is used.
    """
    assert matrices
    domain = matrices[0].domain
    if prime == 2 or fields.discriminant(domain) % prime == 0:
        return None
    if fields.generator_scale(domain) % prime == 0:
        return None
    if _divides_a_denominator(matrices, prime):
        return None

    # the prime does not divide the discriminant of the equation order, so it is not an index
    # divisor, and there is no need to work in the maximal order
    residue_fields = fields.residue_fields_above(domain, prime)
    if len(residue_fields) > 1:
        order = residue_fields[0].order
        warnings.warn(
            f"The prime {prime} splits into {len(residue_fields)} prime ideals of {domain};"
            f" reducing modulo the first of these, which has residue field GF({order})"
        )
    return _reduce_invertible(matrices, residue_fields[0])


def _divides_a_denominator(matrices: Sequence[DomainMatrix], prime: int) -> bool:
    """Does the prime divide the denominator of some nonzero matrix entry?"""
    for matrix in matrices:
        for entry in (entry for row in matrix.to_list() for entry in row):
            if entry == matrix.domain.zero:
                continue
            _, denominator = fields.numerator_and_denominator(entry, matrix.domain)
            if denominator % prime == 0:
                return True
    return False


def _reduce_invertible(
    matrices: Sequence[DomainMatrix], residue_field: fields.ResidueField
) -> Reduction | None:
    """Reduce matrices into a residue field, or return None if some reduction is not invertible."""
    reduced_matrices = []
    for matrix in matrices:
        reduced_matrix = residue_field.reduce_matrix(matrix)
        if np.linalg.matrix_rank(reduced_matrix) != reduced_matrix.shape[0]:
            return None
        reduced_matrices.append(reduced_matrix)
    return Reduction(residue_field, tuple(reduced_matrices))


def select_modulus(
    matrices: Sequence[DomainMatrix],
    start: int = DEFAULT_START_PRIME,
    *,
    max_prime: int | None = None,
) -> Reduction:
    """Reduce matrices modulo the smallest suitable prime that is strictly greater than start.

    Only finitely many primes are unsuitable, so this search terminates.  If max_prime is provided,
    give up with a ModulusSearchExhaustedError after trying all primes up to max_prime.
    """
    prime = start
    while True:
        prime = fields.next_prime(prime)
        if max_prime is not None and prime > max_prime:
            raise ModulusSearchExhaustedError(
                f"No suitable prime found in the range ({start}, {max_prime}]"
            )
        reduction = validate_modulus(matrices, prime)
        if reduction is not None:
            return reduction
