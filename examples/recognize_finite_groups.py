#!/usr/bin/env python3
"""Decide whether some matrix groups over the rationals and number fields are finite.

For every finite group, print its order, the prime modulo which it was recognized, and a
presentation on its generators.
"""

import sympy
from sympy.polys.domains import QQ

import matgroups

# left multiplication by the quaternion units i and j, in the basis (1, i, j, k)
QUATERNION_I = [[0, -1, 0, 0], [1, 0, 0, 0], [0, 0, 0, -1], [0, 0, 1, 0]]
QUATERNION_J = [[0, 0, -1, 0], [0, 0, 0, 1], [1, 0, 0, 0], [0, -1, 0, 0]]

COS = sympy.sqrt(2) / 2

EXAMPLES = {
    "quaternion group over Q": ([QUATERNION_I, QUATERNION_J], None),
    "quaternion group over Q(i)": (
        [[[sympy.I, 0], [0, -sympy.I]], [[0, 1], [-1, 0]]],
        QQ.algebraic_field(sympy.I),
    ),
    "rotation by 45 degrees": ([[[COS, -COS], [COS, COS]]], None),
    "rotation by arctan(4/3)": ([[["3/5", "-4/5"], ["4/5", "3/5"]]], None),
    "unipotent matrix": ([[[1, 1], [0, 1]]], None),
}


if __name__ == "__main__":
    engine = matgroups.NativeGroupEngine()
    for name, (matrices, field) in EXAMPLES.items():
        result = matgroups.recognize(matrices, field=field, engine=engine)
        print()
        print(name)
        if isinstance(result, matgroups.Ok):
            group = result.group
            print(f"finite of order {group.order}, recognized modulo {group.prime} in {group}")
            presentation = engine.presentation(group)
            print(f"presentation with {len(presentation.relators)} relators")
            if len(presentation.relators) < 10:
                print(presentation)
        else:
            print(f"not finite: {result.error}")
