"""Exact arithmetic over the rationals and number fields, and reduction modulo primes

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

Matrices over a field K (either the rationals Q or a number field K = Q(θ)) are represented
by SymPy DomainMatrix objects in dense format.  Elements of a number field are polynomials in
θ with rational coefficients, so every element a can be written as a = (c_0 + c_1 θ + ... +
c_{d-1} θ^{d-1}) / m with integers c_i and m, which identifies a numerator in the equation
order Z[θ] and a denominator m.

Reduction modulo a rational prime p that does not divide the discriminant of the defining
polynomial f of θ relies on the Dedekind-Kummer theorem: prime ideals of Z[θ] above p are in
one-to-one correspondence with the monic irreducible factors g of (f mod p), and the residue
field of the prime ideal associated with g is GF(p)[x] / (g), in which θ is sent to a root of g.
"""

from __future__ import annotations

import dataclasses
import functools
import math
from collections.abc import Sequence
from typing import Any

import galois
import sympy
import sympy.polys.polyerrors
from sympy.polys.constructor import construct_domain
from sympy.polys.domains import QQ, AlgebraicField
from sympy.polys.domains.domain import Domain
from sympy.polys.matrices import DomainMatrix

from matgroups.errors import InvalidInputError

MatrixLike = Any  # nested sequence, numpy array, sympy.Matrix, or DomainMatrix


################################################################################
# number fields


def is_number_field(domain: Domain) -> bool:
    """Is this domain an algebraic number field (rather than the rationals)?"""
    return isinstance(domain, AlgebraicField)


def _integral_generator(domain: Domain) -> tuple[list[int], int]:
    """Minimal polynomial of an algebraic integer d * θ that generates a number field K = Q(θ).

    If f(x) = x^n + c_1 x^(n-1) + ... + c_n is the minimal polynomial of θ and d is the least common
    multiple of the denominators of c_1, ..., c_n, then d * θ is a root of the monic integer
    polynomial g(x) = d^n f(x / d), whose coefficients are d^k c_k.  Return the coefficients of g
    (leading first) and the scale factor d.
    """
    if not is_number_field(domain):
        return [1, 0], 1
    coefficients = [QQ.convert(coefficient) for coefficient in domain.mod.to_list()]
    coefficients = [coefficient / coefficients[0] for coefficient in coefficients]
    scale = math.lcm(*(int(coefficient.denominator) for coefficient in coefficients))
    integral_coefficients = [
        int((coefficient * scale**power).numerator)
        for power, coefficient in enumerate(coefficients)
    ]
    return integral_coefficients, scale


def defining_polynomial(domain: Domain) -> list[int]:
    """Coefficients (leading first) of the monic integer polynomial defining a number field.

    This polynomial is the minimal polynomial of the algebraic integer d * θ, where θ is the
    generator of the field and d = generator_scale(domain).  The rationals are treated as the
    degree-one field defined by f(x) = x.
    """
    return _integral_generator(domain)[0]


def generator_scale(domain: Domain) -> int:
    """The positive integer d for which d * θ is an algebraic integer, with θ as above."""
    return _integral_generator(domain)[1]


def degree(domain: Domain) -> int:
    """Degree of a field over the rationals."""
    return len(defining_polynomial(domain)) - 1


def discriminant(domain: Domain) -> int:
    """Discriminant of the equation order Z[d * θ] of a number field K = Q(θ)."""
    poly = sympy.Poly(defining_polynomial(domain), sympy.Symbol("x"))
    return int(poly.discriminant())


def numerator_and_denominator(element: Any, domain: Domain) -> tuple[list[int], int]:
    """Split an element of the rationals or a number field into a numerator and denominator.

    The numerator is an integer polynomial in the generator θ of the field, represented by its
    coefficients (leading first), and the denominator is a positive integer.
    """
    coefficients = element.to_list() if is_number_field(domain) else [element]
    denominator = math.lcm(*(int(coefficient.denominator) for coefficient in coefficients))
    numerator = [
        int(coefficient.numerator) * (denominator // int(coefficient.denominator))
        for coefficient in coefficients
    ]
    return numerator, denominator


def next_prime(number: int) -> int:
    """The smallest prime strictly greater than the given number."""
    return int(sympy.nextprime(number))


################################################################################
# residue fields


@dataclasses.dataclass(frozen=True)
class ResidueField:
    """Residue field GF(p^f) of a prime ideal above p, together with the reduction map onto it.

    The reduction map sends the generator θ of the number field (or 0, for the rationals, which is
    irrelevant) to the field element r / d.  Here r is the field element whose integer
    representation is generator_image, and d = scale is the factor that makes d * θ an algebraic
    integer.
    """

    prime: int
    field: type[galois.FieldArray]
    generator_image: int = 0
    scale: int = 1

    @property
    def degree(self) -> int:
        """Residue degree f, such that this field has order p^f."""
        return self.field.degree

    @property
    def order(self) -> int:
        """Number of elements in this field."""
        return self.field.order

    @property
    def characteristic(self) -> int:
        """Characteristic of this field."""
        return self.field.characteristic

    @staticmethod
    def prime_field(prime: int) -> ResidueField:
        """The residue field Z/pZ of the rationals at a prime p."""
        return ResidueField(prime, galois.GF(prime))

    def reduce(self, element: Any, domain: Domain) -> galois.FieldArray:
        """Reduce an element of the rationals or a number field into this residue field."""
        numerator, denominator = numerator_and_denominator(element, domain)
        if denominator % self.prime == 0:
            raise ValueError(
                f"Cannot reduce {element} modulo {self.prime}: its denominator is {denominator}"
            )
        root = self.field(self.generator_image) / self.field(self.scale % self.prime)
        value = self.field(0)
        for coefficient in numerator:
            value = value * root + self.field(coefficient % self.prime)
        return value / self.field(denominator % self.prime)

    def reduce_matrix(self, matrix: DomainMatrix) -> galois.FieldArray:
        """Reduce every entry of a matrix into this residue field."""
        return self.field(
            [[int(self.reduce(entry, matrix.domain)) for entry in row] for row in matrix.to_list()]
        )


def residue_fields_above(domain: Domain, prime: int) -> list[ResidueField]:
    """Residue fields of the prime ideals of the equation order that lie above a rational prime.

    Requires that the prime does not divide the discriminant of the equation order, or the factor d
    that makes d * θ an algebraic integer.
    """
    coefficients, scale = _integral_generator(domain)
    if scale % prime == 0:
        raise ValueError(
            f"Cannot reduce {domain} modulo {prime}, which divides the denominator {scale} of its"
            " generator"
        )
    base_field = galois.GF(prime)
    coefficients = [coefficient % prime for coefficient in coefficients]
    factors, _ = galois.Poly(coefficients, field=base_field).factors()

    residue_fields = []
    for factor in factors:
        if factor.degree == 1:
            # the factor is x + c, with root -c
            root = int(-factor.coeffs[-1])
            residue_fields.append(ResidueField(prime, base_field, root, scale))
        else:
            # the integer representation of the polynomial "x" in GF(p^f) is p
            field = galois.GF(prime**factor.degree, irreducible_poly=factor)
            residue_fields.append(ResidueField(prime, field, prime, scale))
    return residue_fields


################################################################################
# matrices over the rationals or a number field


def as_domain_matrices(
    matrices: Sequence[MatrixLike], field: Domain | None = None
) -> list[DomainMatrix]:
    """Convert matrices into dense DomainMatrix objects over a common field.

    If no field is provided, the field is inferred from the matrix entries: the rationals if all
    entries are rational, and otherwise a number field that contains all entries.  Raise an
    InvalidInputError if the matrices are not a nonempty list of invertible square matrices of equal
    size over the rationals or a number field.
    """
    matrices = list(matrices)
    if not matrices:
        raise InvalidInputError("At least one generating matrix is required")

    field = _as_valid_field(field if field is not None else _infer_field(matrices))
    converted = [_as_domain_matrix(matrix, field) for matrix in matrices]

    sizes = {matrix.shape[0] for matrix in converted}
    if len(sizes) > 1:
        raise InvalidInputError(f"All matrices must have the same size (provided: {sorted(sizes)})")
    for index, matrix in enumerate(converted):
        if matrix.rank() != matrix.shape[0]:
            raise InvalidInputError(f"Matrix {index} is not invertible")
    return converted


def _get_rows(matrix: MatrixLike) -> list[list[Any]]:
    """Rows of a matrix, with entries as SymPy objects."""
    if isinstance(matrix, DomainMatrix):
        return [[matrix.domain.to_sympy(entry) for entry in row] for row in matrix.to_list()]
    if isinstance(matrix, sympy.MatrixBase):
        return matrix.tolist()
    try:
        rows = [[sympy.sympify(entry) for entry in row] for row in matrix]
    except (TypeError, sympy.SympifyError):
        raise InvalidInputError(f"Cannot interpret as a two-dimensional matrix: {matrix}")
    if not all(isinstance(entry, sympy.Basic) for row in rows for entry in row):
        raise InvalidInputError(f"Cannot interpret as a two-dimensional matrix: {matrix}")
    return rows


def _infer_field(matrices: Sequence[MatrixLike]) -> Domain:
    """Identify a field that contains the entries of all matrices."""
    if all(isinstance(matrix, DomainMatrix) for matrix in matrices):
        return functools.reduce(lambda aa, bb: aa.unify(bb), [matrix.domain for matrix in matrices])

    entries = [entry for matrix in matrices for row in _get_rows(matrix) for entry in row]
    if all(entry.is_Rational for entry in entries):
        return QQ
    domain, _ = construct_domain(entries, extension=True)
    return domain


def _as_valid_field(domain: Domain) -> Domain:
    """Make sure that a domain is the rationals or a number field."""
    if domain.is_ZZ:
        return QQ
    if domain.is_QQ or (is_number_field(domain) and domain.dom.is_QQ):
        return domain
    raise InvalidInputError(
        f"Matrix entries must lie in the rationals or a number field, not in {domain}\n"
        "Try providing a number field explicitly, for example field=QQ.algebraic_field(sqrt(2))"
    )


def _as_domain_matrix(matrix: MatrixLike, field: Domain) -> DomainMatrix:
    """Convert a single square matrix into a dense DomainMatrix over the given field."""
    try:
        if isinstance(matrix, DomainMatrix):
            converted = matrix.convert_to(field)
        else:
            rows = _get_rows(matrix)
            if not rows or any(len(row) != len(rows) for row in rows):
                raise InvalidInputError(f"Matrices must be square and nonempty: {matrix}")
            elements = [[field.from_sympy(entry) for entry in row] for row in rows]
            converted = DomainMatrix(elements, (len(rows), len(rows)), field)
    except sympy.polys.polyerrors.CoercionFailed:
        raise InvalidInputError(f"Cannot convert matrix entries into {field}: {matrix}")

    num_rows, num_cols = converted.shape
    if num_rows != num_cols or num_rows == 0:
        raise InvalidInputError(
            f"Matrices must be square and nonempty (provided shape: {converted.shape})"
        )
    return converted.to_dense()
