"""Unit tests for groups.py

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

from __future__ import annotations

import galois
import numpy as np
import pytest
from sympy.polys.domains import QQ
from sympy.polys.matrices import DomainMatrix

from matgroups import fields, groups

GF3 = galois.GF(3)
GF7 = galois.GF(7)


def get_quaternion_group() -> groups.FiniteMatrixGroup:
    """The quaternion group of order 8 as a subgroup of SL(2, 3)."""
    return groups.FiniteMatrixGroup(GF3([[0, 2], [1, 0]]), GF3([[1, 1], [1, 2]]))


def test_words() -> None:
    """Reduce and invert words."""
    assert groups.reduce_word([(0, 1), (0, 1), (1, 2), (1, -2), (0, -2)]) == ()
    assert groups.reduce_word([(0, 1), (1, 0), (0, 1)]) == ((0, 2),)
    assert groups.reduce_word([(0, 1), (1, 1), (1, -1), (2, 3)]) == ((0, 1), (2, 3))
    assert groups.invert_word(((0, 2), (1, -1))) == ((1, 1), (0, -2))


def test_evaluate_word() -> None:
    """Multiply out words in matrices over finite and infinite fields."""
    generator = GF7([[1, 1], [0, 1]])
    assert np.array_equal(groups.evaluate_word(((0, 3),), [generator]), GF7([[1, 3], [0, 1]]))
    assert np.array_equal(groups.evaluate_word(((0, -1),), [generator]), GF7([[1, 6], [0, 1]]))
    assert groups.is_identity(groups.evaluate_word(((0, 7),), [generator]))
    assert groups.is_identity(groups.evaluate_word((), [generator]))
    assert not groups.is_identity(generator)

    (matrix,) = fields.as_domain_matrices([[[1, 1], [0, 1]]])
    product = groups.evaluate_word(((0, 2), (0, -5)), [matrix])
    assert product.to_list() == [[QQ(1), QQ(-3)], [QQ(0), QQ(1)]]
    assert not groups.is_identity(product)
    assert groups.is_identity(groups.evaluate_word(((0, 2), (0, -2)), [matrix]))
    assert groups.is_identity(DomainMatrix.eye(3, QQ).to_dense())

    # precomputed inverses are used for negative exponents
    inverse = GF7([[1, 6], [0, 1]])
    product = groups.evaluate_word(((0, 2), (0, -3)), [generator], inverses=[inverse])
    assert np.array_equal(product, inverse)
    product = groups.evaluate_word(((0, -2),), [matrix], inverses=[matrix.inv()])
    assert product.to_list() == [[QQ(1), QQ(-2)], [QQ(0), QQ(1)]]


def test_presentation_str() -> None:
    """Print presentations."""
    presentation = groups.Presentation(2, (((0, 2),), ((0, 1), (1, -1)), ()))
    assert str(presentation) == "< x0, x1 | x0^2, x0^1*x1^-1, 1 >"
    assert presentation.num_auxiliary_generators == 0

    presentation = groups.Presentation(1, (((1, 3),),), (((0, 2),),))
    assert str(presentation) == "< x0; x1 = x0^2 | x1^3 >"
    assert presentation.num_auxiliary_generators == 1

    generators = groups.extend_generators(presentation, [GF7([[3]])])
    assert len(generators) == 2
    assert np.array_equal(generators[1], GF7([[2]]))
    assert groups.is_identity(groups.evaluate_word(((1, 3),), generators))


def test_matrix_group() -> None:
    """Construct a matrix group and query its properties."""
    group = get_quaternion_group()
    assert group.order == 8
    assert group.to_sympy().order() == 8
    assert group.field is GF3
    assert group.characteristic == 3
    assert group.dimension == 2
    assert group.residue_field is None
    assert group.prime is None
    assert len(group.generators) == len(group.permutation_generators) == 2
    assert str(group) == "Matrix group of degree 2 over GF(3)"

    members = list(group.generate())
    assert len(members) == 8
    assert len({member.tobytes() for member in members}) == 8
    assert all(member in group for member in members)
    assert GF3([[2, 0], [0, 2]]) in group
    assert GF3([[1, 1], [0, 1]]) not in group
    assert GF3([[2, 0], [0, 1]]) not in group
    assert GF3([[1]]) not in group

    group = groups.FiniteMatrixGroup(GF7([[3]]), order=6)
    assert group.order == 6
    assert groups.NativeGroupEngine().order(group) == 6

    with pytest.raises(ValueError, match="at least one generator"):
        groups.FiniteMatrixGroup()
    with pytest.raises(ValueError, match="same finite field"):
        groups.FiniteMatrixGroup(GF3([[1]]), GF7([[1]]))
    with pytest.raises(ValueError, match="square matrices"):
        groups.FiniteMatrixGroup(GF3([[1]]), GF3([[1, 0], [0, 1]]))


def test_permutation_action() -> None:
    """The permutation action of a matrix group is a homomorphism."""
    group = get_quaternion_group()
    aa, bb = group.generators
    perm_aa, perm_bb = group.permutation_generators
    assert group.to_permutation(aa) == perm_aa
    assert group.to_permutation(aa @ bb) == perm_aa * perm_bb
    assert group.to_permutation(GF3([[1, 0], [0, 0]])) is None


def test_native_presentation() -> None:
    """Relators of a native presentation evaluate to the identity on the group generators."""
    engine = groups.NativeGroupEngine()
    for group in [
        get_quaternion_group(),
        groups.FiniteMatrixGroup(GF7([[3]])),
        groups.FiniteMatrixGroup(GF7([[1]]), GF7([[6]])),
    ]:
        presentation = engine.presentation(group)
        assert presentation.num_generators == len(group.generators)
        assert presentation.relators
        generators = groups.extend_generators(presentation, group.generators)
        assert all(
            groups.is_identity(engine.evaluate_word(relator, generators))
            for relator in presentation.relators
        )

    # the cyclic group of order 6 is presented by a single relator
    presentation = engine.presentation(groups.FiniteMatrixGroup(GF7([[3]])))
    assert presentation.relators == (((0, 6),),)

    # relators "see" trivial generators
    presentation = engine.presentation(groups.FiniteMatrixGroup(GF7([[1]]), GF7([[6]])))
    assert ((0, 1),) in presentation.relators

    # presentations of large groups
    group = groups.FiniteMatrixGroup(
        *[get_permutation_matrix(GF3, perm) for perm in get_symmetric_group_generators(9)]
    )
    assert engine.order(group) == 362880
    presentation = engine.presentation(group)
    generators = groups.extend_generators(presentation, group.generators)
    inverses = [np.linalg.inv(generator) for generator in generators]
    assert all(
        groups.is_identity(engine.evaluate_word(relator, generators, inverses=inverses))
        for relator in presentation.relators
    )


def get_permutation_matrix(field: type[galois.FieldArray], perm: list[int]) -> galois.FieldArray:
    """Matrix that sends the standard basis (row) vector e_i to e_{perm[i]}."""
    matrix = field.Zeros((len(perm), len(perm)))
    matrix[list(range(len(perm))), perm] = 1
    return matrix


def get_symmetric_group_generators(size: int) -> list[list[int]]:
    """A transposition and a long cycle, which generate S_n."""
    return [[1, 0] + list(range(2, size)), [(index + 1) % size for index in range(size)]]


def test_stabilizer_chain() -> None:
    """Build stabilizer chains of permutation groups, and sift permutations through them."""
    for size, order in [(2, 2), (3, 6), (4, 24), (5, 120), (7, 5040)]:
        chain = groups.StabilizerChain(get_symmetric_group_generators(size))
        assert chain.order == order
        assert chain.num_generators == 2
        assert len(chain.perms) == chain.num_generators + len(chain.definitions)
        assert len(chain.orbits) == len(chain.base)

    # the alternating group A_4, generated by two 3-cycles
    chain = groups.StabilizerChain([[1, 2, 0, 3], [0, 2, 3, 1]])
    assert chain.order == 12
    assert sorted(chain.orbits[0]) == [0, 1, 2, 3]
    residue, _, _ = chain.sift((1, 0, 3, 2))
    assert residue == chain.identity
    residue, _, _ = chain.sift((1, 0, 2, 3))
    assert residue != chain.identity

    # a trivial group has an empty base
    chain = groups.StabilizerChain([[0, 1, 2]])
    assert chain.order == 1
    assert not chain.base
    assert chain.presentation().relators == (((0, 1),),)


def test_stabilizer_chain_presentation() -> None:
    """Presentations read off from a stabilizer chain hold on exactly the right generators."""
    perms = get_symmetric_group_generators(4)
    presentation = groups.StabilizerChain(perms).presentation()
    assert presentation.num_generators == 2
    assert presentation.relators

    def relators_hold(matrices: list[galois.FieldArray]) -> bool:
        generators = groups.extend_generators(presentation, matrices)
        return all(
            groups.is_identity(groups.evaluate_word(relator, generators))
            for relator in presentation.relators
        )

    matrices = [get_permutation_matrix(GF7, perm) for perm in perms]
    assert relators_hold(matrices)

    # a transposition and a 4-cycle cannot trade places
    assert not relators_hold(matrices[::-1])

    # the generators of a proper quotient of S_4 satisfy all relators (here, S_4 --> {+1, -1})
    assert relators_hold([GF7([[6]]), GF7([[6]])])
