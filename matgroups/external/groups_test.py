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

import unittest.mock

import galois
import pytest

from matgroups import external, groups, recognition

GF3 = galois.GF(3)


def get_quaternion_group() -> groups.FiniteMatrixGroup:
    """The quaternion group of order 8 as a subgroup of SL(2, 3)."""
    return groups.FiniteMatrixGroup(GF3([[0, 2], [1, 0]]), GF3([[1, 1], [1, 2]]))


def test_get_group_commands() -> None:
    """Define groups in GAP by their permutation generators."""
    commands = external.groups.get_group_commands(groups.FiniteMatrixGroup(GF3([[2]])))
    assert commands == ["gens := [(1,2)];", "G := GroupWithGenerators(gens);"]


def test_parse_relator() -> None:
    """Parse relators printed by GAP."""
    assert external.groups.parse_relator("[ 1, 1, 1 ]") == ((0, 3),)
    assert external.groups.parse_relator("[ 2, -1, 1, 2 ]") == ((1, 2),)
    assert external.groups.parse_relator("[ 1, -2 ]") == ((0, 1), (1, -1))
    assert external.groups.parse_relator("[  ]") == ()
    with pytest.raises(ValueError, match="Cannot extract relator"):
        external.groups.parse_relator("[ 0, 1 ]")
    with pytest.raises(ValueError, match="Cannot extract"):
        external.groups.parse_relator("fail")


def test_gap_engine() -> None:
    """Compute group orders and presentations with a (mocked) GAP session."""
    with (
        unittest.mock.patch("matgroups.external.gap.is_installed", return_value=False),
        pytest.raises(ValueError, match="not installed"),
    ):
        external.GapGroupEngine()

    group = get_quaternion_group()
    with unittest.mock.patch("matgroups.external.gap.is_installed", return_value=True):
        engine = external.GapGroupEngine()

    with unittest.mock.patch("matgroups.external.gap.get_output", return_value="8\n"):
        assert engine.order(group) == 8
    with (
        unittest.mock.patch("matgroups.external.gap.get_output", return_value="error"),
        pytest.raises(ValueError, match="Cannot extract group order"),
    ):
        engine.order(group)

    output = "[ 1, 1, 1, 1 ]\n[ 1, 2, -1, 2 ]\n[  ]\n"
    with unittest.mock.patch("matgroups.external.gap.get_output", return_value=output) as mock:
        presentation = engine.presentation(group)
    assert "IsomorphismFpGroupByGenerators(G, gens);" in mock.call_args.args
    assert presentation.num_generators == 2
    assert presentation.relators == (((0, 4),), ((0, 1), (1, 1), (0, -1), (1, 1)))


def test_recognition_with_gap_engine() -> None:
    """Recognize groups with a (mocked) GAP engine."""
    with unittest.mock.patch("matgroups.external.gap.is_installed", return_value=True):
        engine = external.GapGroupEngine()

    with unittest.mock.patch("matgroups.external.gap.get_output", side_effect=["2", "[ 1, 1 ]"]):
        result = recognition.recognize([[[-1]]], engine=engine)
    assert isinstance(result, recognition.Ok)
    assert result.group.order == 2

    with unittest.mock.patch("matgroups.external.gap.get_output", side_effect=["2", "[ 1, 1 ]"]):
        result = recognition.recognize([[[2]]], engine=engine)
    assert isinstance(result, recognition.Err)


@pytest.mark.skipif(not external.gap.is_installed(), reason="GAP 4 is not installed")
def test_gap_engine_with_gap() -> None:  # pragma: no cover
    """Compute group orders and presentations in GAP."""
    engine = external.GapGroupEngine()
    group = get_quaternion_group()
    assert engine.order(group) == 8
    presentation = engine.presentation(group)
    assert presentation.relators
    assert all(
        groups.is_identity(engine.evaluate_word(relator, group.generators))
        for relator in presentation.relators
    )
