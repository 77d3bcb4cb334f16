"""Module for computing with finite matrix groups in the GAP computer algebra system

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

Matrix groups are passed to GAP as permutation groups (see
FiniteMatrixGroup.permutation_generators), which sidesteps the need to identify our finite
fields with those of GAP.
"""

from __future__ import annotations

import matgroups.external.gap
from matgroups.groups import FiniteMatrixGroup, GroupEngine, Presentation, Word, reduce_word


def get_group_commands(group: FiniteMatrixGroup) -> list[str]:
    """GAP commands that define the list of generators "gens" and the group "G" they generate."""
    generators = ",".join(
        matgroups.external.gap.to_gap_permutation(perm) for perm in group.permutation_generators
    )
    return [f"gens := [{generators}];", "G := GroupWithGenerators(gens);"]


def parse_relator(line: str) -> Word:
    """Parse a relator printed by GAP's LetterRepAssocWord into a word in 0-indexed generators.

    GAP represents letters by nonzero integers: the letter k > 0 is free generator number k (indexed
    from 1), and -k is its inverse.
    """
    letters = matgroups.external.gap.parse_integer_list(line)
    if any(letter == 0 for letter in letters):
        raise ValueError(f"Cannot extract relator from string: {line}")
    return reduce_word((abs(letter) - 1, 1 if letter > 0 else -1) for letter in letters)


class GapGroupEngine(GroupEngine):
    """Compute with finite matrix groups in GAP."""

    def __init__(self) -> None:
        if not matgroups.external.gap.is_installed():
            raise ValueError("GAP 4 is not installed")

    def order(self, group: FiniteMatrixGroup) -> int:
        commands = get_group_commands(group) + ["Print(Size(G));"]
        output = matgroups.external.gap.get_output(*commands)
        try:
            return int(output.strip())
        except ValueError:
            raise ValueError(f"Cannot extract group order from GAP output: {output}")

    def presentation(self, group: FiniteMatrixGroup) -> Presentation:
        commands = get_group_commands(group) + [
            "iso := IsomorphismFpGroupByGenerators(G, gens);",
            "F := Range(iso);",
            r'for rel in RelatorsOfFpGroup(F) do Print(LetterRepAssocWord(rel), "\n"); od;',
        ]
        output = matgroups.external.gap.get_output(*commands)
        relators = [parse_relator(line) for line in output.splitlines() if line.strip()]
        relators = [relator for relator in relators if relator]
        return Presentation(len(group.generators), tuple(relators))
