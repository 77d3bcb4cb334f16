"""Finite matrix groups over finite fields, and engines that compute their orders and presentations

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

A FiniteMatrixGroup is generated by invertible matrices over a finite field.  Under the hood,
the group is represented by a SymPy PermutationGroup that describes how the generators permute
the orbit of the standard basis (row) vectors.  Matrices act on row vectors from the right,
v --> v @ M, which makes the lift from matrices to permutations a homomorphism with respect
to how SymPy composes permutations: the permutation of M1 @ M2 is the permutation of M1 times
the permutation of M2.  This action is faithful, since a matrix is determined by how it acts
on the standard basis.

Words in the generators of a group are tuples of (generator index, exponent) pairs, read from
left to right, such that ((0, 2), (1, -1)) stands for the product g_0 @ g_0 @ g_1^-1.
"""

from __future__ import annotations

import abc
import dataclasses
import functools
import math
from collections.abc import Iterable, Iterator, Sequence
from typing import TypeVar

import galois
import numpy as np
import numpy.typing as npt
import sympy.combinatorics as comb
from sympy.polys.matrices import DomainMatrix

from matgroups.fields import ResidueField

Word = tuple[tuple[int, int], ...]
Perm = tuple[int, ...]
Matrix = TypeVar("Matrix", galois.FieldArray, DomainMatrix)


################################################################################
# words and presentations


def reduce_word(letters: Iterable[tuple[int, int]]) -> Word:
    """Freely reduce a word: combine adjacent powers of a generator, and drop trivial powers."""
    reduced: list[tuple[int, int]] = []
    for index, exponent in letters:
        if reduced and reduced[-1][0] == index:
            exponent += reduced.pop()[1]
        if exponent:
            reduced.append((index, exponent))
    return tuple(reduced)


def invert_word(word: Word) -> Word:
    """The inverse of a word."""
    return tuple((index, -exponent) for index, exponent in reversed(word))


def evaluate_word(
    word: Word, matrices: Sequence[Matrix], *, inverses: Sequence[Matrix] | None = None
) -> Matrix:
    """Substitute matrices for the generators of a word, and multiply everything out.

    The matrices may be galois.FieldArray matrices over a finite field, or (exact) DomainMatrix
    matrices over the rationals or a number field.  Inverses of the matrices may be provided to
    avoid recomputing them for every word.
    """
    assert matrices
    if isinstance(matrices[0], DomainMatrix):
        size = matrices[0].shape[0]
        result = DomainMatrix.eye(size, matrices[0].domain).to_dense()
        for index, exponent in word:
            if exponent > 0:
                base = matrices[index]
            else:
                base = inverses[index] if inverses is not None else matrices[index].inv()
            result = result.matmul(base ** abs(exponent))
        return result

    field = type(matrices[0])
    result = field.Identity(matrices[0].shape[0])
    for index, exponent in word:
        if exponent > 0:
            base = matrices[index]
        else:
            base = inverses[index] if inverses is not None else np.linalg.inv(matrices[index])
        for _ in range(abs(exponent)):
            result = result @ base
    return result


def is_identity(matrix: galois.FieldArray | DomainMatrix) -> bool:
    """Is the given (square) matrix the identity matrix?"""
    if isinstance(matrix, DomainMatrix):
        one, zero = matrix.domain.one, matrix.domain.zero
        return all(
            entry == (one if row == col else zero)
            for row, entries in enumerate(matrix.to_list())
            for col, entry in enumerate(entries)
        )
    return np.array_equal(matrix, type(matrix).Identity(matrix.shape[0]))


@dataclasses.dataclass(frozen=True)
class Presentation:
    """A finite presentation of a group on the free generators 0, 1, ..., n-1.

    A presentation may introduce auxiliary generators n, n+1, ..., each of which is defined by a
    word in the generators that precede it.  Relators are words in all generators.  Eliminating the
    auxiliary generators by substituting their definitions into the relators yields an ordinary
    presentation on the free generators, but with (much) longer relators.
    """

    num_generators: int
    relators: tuple[Word, ...]
    definitions: tuple[Word, ...] = ()

    @property
    def num_auxiliary_generators(self) -> int:
        """Number of auxiliary generators, defined in terms of the free generators."""
        return len(self.definitions)

    def __str__(self) -> str:
        def word_to_str(word: Word) -> str:
            return "*".join(f"x{index}^{exponent}" for index, exponent in word) or "1"

        generators = ", ".join(f"x{index}" for index in range(self.num_generators))
        definitions = "".join(
            f"; x{self.num_generators + index} = {word_to_str(word)}"
            for index, word in enumerate(self.definitions)
        )
        return f"< {generators}{definitions} | {', '.join(map(word_to_str, self.relators))} >"


def extend_generators(presentation: Presentation, matrices: Sequence[Matrix]) -> list[Matrix]:
    """Append the auxiliary generators of a presentation to matrices for its free generators."""
    assert len(matrices) == presentation.num_generators
    generators = list(matrices)
    for definition in presentation.definitions:
        generators.append(evaluate_word(definition, generators))
    return generators


################################################################################
# matrix groups


class FiniteMatrixGroup:
    """A group generated by invertible matrices over a finite field.

    A group obtained by reducing matrices over the rationals or a number field additionally knows
    the residue field that the matrices were reduced into.
    """

    _generators: tuple[galois.FieldArray, ...]
    _order: int | None
    _residue_field: ResidueField | None

    def __init__(
        self,
        *generators: galois.FieldArray,
        order: int | None = None,
        residue_field: ResidueField | None = None,
    ) -> None:
        if not generators:
            raise ValueError("A matrix group requires at least one generator")
        field = type(generators[0])
        if not all(isinstance(generator, field) for generator in generators):
            raise ValueError("All generators of a matrix group must be over the same finite field")
        self._generators = tuple(
            field(np.asarray(generator).view(np.ndarray).astype(int)) for generator in generators
        )
        shapes = {generator.shape for generator in self._generators}
        if len(shapes) != 1 or any(len(set(shape)) != 1 or len(shape) != 2 for shape in shapes):
            raise ValueError(f"Generators must be square matrices of equal size (shapes: {shapes})")
        self._order = order
        self._residue_field = residue_field

    @property
    def generators(self) -> list[galois.FieldArray]:
        """Generators of this group, in the order in which they were provided."""
        return list(self._generators)

    @property
    def field(self) -> type[galois.FieldArray]:
        """Base field of the matrices in this group."""
        return type(self._generators[0])

    @property
    def characteristic(self) -> int:
        """Characteristic of the base field."""
        return self.field.characteristic

    @property
    def dimension(self) -> int:
        """Dimension of the vector space that this group acts on."""
        return self._generators[0].shape[0]

    @property
    def residue_field(self) -> ResidueField | None:
        """The residue field that the generators were reduced into, if any."""
        return self._residue_field

    @property
    def prime(self) -> int | None:
        """The rational prime modulo which the generators were reduced, if any."""
        return None if self._residue_field is None else self._residue_field.prime

    @property
    def order(self) -> int:
        """Number of members in this group."""
        if self._order is None:
            self._order = self.to_sympy().order()
        return self._order

    def __str__(self) -> str:
        return f"Matrix group of degree {self.dimension} over GF({self.field.order})"

    @functools.cached_property
    def _action(
        self,
    ) -> tuple[list[galois.FieldArray], dict[bytes, int], list[comb.Permutation]]:
        """Orbit of the standard basis vectors, and the permutations of it by the generators."""
        identity = self.field.Identity(self.dimension)
        points = [identity[row] for row in range(self.dimension)]
        point_index = {point.tobytes(): index for index, point in enumerate(points)}

        images: list[list[int]] = [[] for _ in self._generators]
        index = 0
        while index < len(points):
            for generator, generator_images in zip(self._generators, images):
                image = points[index] @ generator
                key = image.tobytes()
                if key not in point_index:
                    point_index[key] = len(points)
                    points.append(image)
                generator_images.append(point_index[key])
            index += 1

        permutations = [comb.Permutation(generator_images) for generator_images in images]
        return points, point_index, permutations

    @property
    def permutation_generators(self) -> list[comb.Permutation]:
        """Permutations of the orbit of the standard basis vectors, one for each generator."""
        return list(self._action[2])

    @functools.cached_property
    def _permutation_group(self) -> comb.PermutationGroup:
        return comb.PermutationGroup(self.permutation_generators)

    def to_sympy(self) -> comb.PermutationGroup:
        """A SymPy permutation group that is isomorphic to this group."""
        return self._permutation_group

    def to_permutation(self, matrix: npt.NDArray[np.int_]) -> comb.Permutation | None:
        """Permutation of the orbit of the standard basis vectors by a matrix.

        Return None if the matrix does not preserve that orbit, in which case it is not in this
        group.
        """
        points, point_index, _ = self._action
        matrix = self.field(np.asarray(matrix).view(np.ndarray).astype(int))
        images = []
        for point in points:
            image_index = point_index.get((point @ matrix).tobytes())
            if image_index is None:
                return None
            images.append(image_index)
        return comb.Permutation(images)

    def __contains__(self, matrix: npt.NDArray[np.int_]) -> bool:
        if np.shape(matrix) != (self.dimension, self.dimension):
            return False
        permutation = self.to_permutation(matrix)
        return permutation is not None and permutation in self.to_sympy()

    def generate(self) -> Iterator[galois.FieldArray]:
        """Iterate over all members of this group."""
        identity = self.field.Identity(self.dimension)
        members = {identity.tobytes(): identity}
        queue = [identity]
        yield identity
        for member in queue:
            for generator in self._generators:
                product = member @ generator
                key = product.tobytes()
                if key not in members:
                    members[key] = product
                    queue.append(product)
                    yield product


################################################################################
# engines for computing with finite groups


class GroupEngine(abc.ABC):
    """Interface to a system that computes with finite matrix groups."""

    @abc.abstractmethod
    def order(self, group: FiniteMatrixGroup) -> int:
        """Number of members in a group."""

    @abc.abstractmethod
    def presentation(self, group: FiniteMatrixGroup) -> Presentation:
        """Finite presentation of a group on its generators.

        Free generator number i of the presentation corresponds to group.generators[i].
        """

    def evaluate_word(
        self, word: Word, matrices: Sequence[Matrix], *, inverses: Sequence[Matrix] | None = None
    ) -> Matrix:
        """Substitute matrices for the generators of a word, and multiply everything out."""
        return evaluate_word(word, matrices, inverses=inverses)


def _compose(aa: Perm, bb: Perm) -> Perm:
    """The permutation that applies aa first, and then bb."""
    return tuple(bb[point] for point in aa)


def _invert(perm: Perm) -> Perm:
    inverse = [0] * len(perm)
    for point, image in enumerate(perm):
        inverse[image] = point
    return tuple(inverse)


class StabilizerChain:
    """Base and strong generating set of a permutation group, built by the Schreier-Sims algorithm.

    Strong generators are tracked as words.  The first strong generators are the generators of the
    group, and every additional (auxiliary) strong generator is defined by a word in the strong
    generators that precede it.  Transversals of the stabilizer chain are words in the strong
    generators, read off from breadth-first Schreier trees.

    A stabilizer chain yields a presentation of its group.  Let G_i be the stabilizer of the first i
    base points, S_i the strong generators in G_i, and u_b the transversal word for a point b in the
    orbit of the i-th base point under G_i.  Then G_i is presented by the relators of G_{i+1}
    together with one relator u_b * s * (u_{b^s})^-1 * w^-1 for every b and every s in S_i, where w
    is the word in S_{i+1} obtained by sifting u_b * s * (u_{b^s})^-1 through the rest of the chain.
    See Section 6.1 of Holt, Eick, and O'Brien, "Handbook of Computational Group Theory".

    Permutations are tuples of images, and compose from left to right as in SymPy.
    """

    def __init__(self, generators: Sequence[Sequence[int]]) -> None:
        assert generators
        self.num_generators = len(generators)
        self.perms: list[Perm] = [tuple(perm) for perm in generators]
        self.definitions: list[Word] = []
        self.identity: Perm = tuple(range(len(self.perms[0])))
        self.base: list[int] = []
        self._transversals: list[dict[int, tuple[Perm, Word]]] = []
        for perm in self.perms:
            if perm != self.identity and all(perm[point] == point for point in self.base):
                self._extend_base(perm)
        self._schreier_sims()

    @property
    def order(self) -> int:
        """Number of members in the group."""
        return math.prod(len(transversal) for transversal in self._transversals)

    @property
    def orbits(self) -> list[list[int]]:
        """Orbits of the base points under their stabilizer subgroups."""
        return [list(transversal) for transversal in self._transversals]

    def _extend_base(self, perm: Perm) -> None:
        """Add a point moved by the given permutation to the base."""
        self.base.append(next(point for point, image in enumerate(perm) if point != image))
        self._transversals.append({})

    def strong_generators(self, level: int) -> list[int]:
        """Indices of the nontrivial strong generators that fix the first base points."""
        fixed_points = self.base[:level]
        return [
            index
            for index, perm in enumerate(self.perms)
            if perm != self.identity and all(perm[point] == point for point in fixed_points)
        ]

    def _update_transversal(self, level: int) -> None:
        root = self.base[level]
        transversal = {root: (self.identity, ())}
        generators = self.strong_generators(level)
        queue = [root]
        for point in queue:
            perm, word = transversal[point]
            for index in generators:
                image = self.perms[index][point]
                if image not in transversal:
                    image_perm = _compose(perm, self.perms[index])
                    transversal[image] = (image_perm, reduce_word(word + ((index, 1),)))
                    queue.append(image)
        self._transversals[level] = transversal

    def _schreier_generators(self, level: int) -> Iterator[tuple[Perm, Word]]:
        """Schreier generators u_b * s * (u_{b^s})^-1 of the next stabilizer, with their words."""
        transversal = self._transversals[level]
        generators = self.strong_generators(level)
        for point, (perm, word) in transversal.items():
            for index in generators:
                image_perm, image_word = transversal[self.perms[index][point]]
                yield (
                    _compose(_compose(perm, self.perms[index]), _invert(image_perm)),
                    word + ((index, 1),) + invert_word(image_word),
                )

    def sift(self, perm: Perm, word: Word = (), level: int = 0) -> tuple[Perm, Word, int]:
        """Sift a permutation through the stabilizer chain, starting at the given level.

        Return the residue of the permutation, a word for the residue (given a word for the
        permutation), and the level at which sifting stopped.  The residue is the identity if and
        only if the permutation is in the group.
        """
        for level in range(level, len(self.base)):
            point = perm[self.base[level]]
            if point not in self._transversals[level]:
                return perm, reduce_word(word), level
            coset_perm, coset_word = self._transversals[level][point]
            perm = _compose(perm, _invert(coset_perm))
            word = word + invert_word(coset_word)
        return perm, reduce_word(word), len(self.base)

    def _schreier_sims(self) -> None:
        level = len(self.base) - 1
        while level >= 0:
            self._update_transversal(level)
            for perm, word in self._schreier_generators(level):
                residue, residue_word, residue_level = self.sift(perm, word, level + 1)
                if residue != self.identity:
                    self.perms.append(residue)
                    self.definitions.append(residue_word)
                    if residue_level == len(self.base):
                        self._extend_base(residue)
                    # recompute the orbits of all stabilizers that contain the new generator
                    level = residue_level
                    break
            else:
                level -= 1

    def presentation(self) -> Presentation:
        """Presentation of the group on its generators, with the auxiliary strong generators."""
        relators = [
            ((index, 1),) for index, perm in enumerate(self.perms) if perm == self.identity
        ]
        for level in range(len(self.base)):
            for perm, word in self._schreier_generators(level):
                residue, relator, _ = self.sift(perm, word, level + 1)
                assert residue == self.identity
                if relator:
                    relators.append(relator)
        return Presentation(
            self.num_generators, tuple(dict.fromkeys(relators)), tuple(self.definitions)
        )


class NativeGroupEngine(GroupEngine):
    """Compute with finite matrix groups in Python.

    Group orders are computed by the Schreier-Sims algorithm in SymPy.  Presentations are read off
    from a stabilizer chain of the permutation action of a group (see StabilizerChain), and consist
    of one relator for every Schreier generator of every stabilizer in the chain.
    """

    def order(self, group: FiniteMatrixGroup) -> int:
        return group.to_sympy().order()

    def presentation(self, group: FiniteMatrixGroup) -> Presentation:
        chain = StabilizerChain([perm.array_form for perm in group.permutation_generators])
        return chain.presentation()
