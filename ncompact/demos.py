"""
Demo registry.

Each demo is a dict describing one document to validate:
    user:         putdown text of the user's content
    libs:         list of putdown library texts
    n:            number of instantiation passes
    description:  str
"""

PROP_LIB = """
[Declare ⇒ ∧ ∨ ¬ ⇔]
// modus ponens
:{ :W :(⇒ W V) V }
// ⇒ introduction
:{ :{ :W V } (⇒ W V) }
// ∧ introduction and elimination
:{ :W :V (∧ W V) }
:{ :(∧ W V) W }
:{ :(∧ W V) V }
// ∨ introduction
:{ :W (∨ W V) }
:{ :V (∨ W V) }
"""

PRED_LIB = """
[Declare ∀ ∃ = 0 1 + ⋅]
// ∀ introduction: prove it for an arbitrary constant
:{ :{ :[Let X] (@ P X) } (∀ y , (@ P y)) }
// ∀ elimination
:{ :(∀ y , (@ P y)) (@ P T) }
// ∃ introduction
:{ :(@ P T) (∃ y , (@ P y)) }
// = reflexivity
:{ (= W W) }
"""

EQ_LIB = """
[Declare ∀ = 0]
:{ :{ :[Let X] (@ P X) } (∀ y , (@ P y)) }
:{ (= W W) }
"""


DEMOS = {
    "modus_ponens": {
        "user": "{ :P :(⇒ P Q) Q }",
        "libs": [PROP_LIB],
        "n": 1,
        "description": "One step of modus ponens",
    },
    "chain": {
        "user": "{ :P :(⇒ P Q) :(⇒ Q R) Q R (∧ Q R) }",
        "libs": [PROP_LIB],
        "n": 2,
        "description": "A chain of implications and a conjunction",
    },
    "not_justified": {
        "user": "{ :(⇒ P Q) Q }",
        "libs": [PROP_LIB],
        "n": 2,
        "description": "Affirming the consequent is not justified",
    },
    "universal": {
        "user": "{ :(∀ x , (= (+ x 0) x)) (= (+ 1 0) 1) }",
        "libs": [PRED_LIB],
        "n": 2,
        "description": "∀ elimination through an expression function",
    },
    "preemie": {
        "user": "{ :[Let c] :(= c 0) (∀ z , (= z 0)) }",
        "libs": [EQ_LIB],
        "n": 2,
        "description": "A conclusion about c escapes the scope of [Let c]",
    },
    "not_preemie": {
        "user": "{ { :[Let c] (= c c) } (∀ z , (= z z)) }",
        "libs": [EQ_LIB],
        "n": 2,
        "description": "The same rule used properly: the Let does not leak",
    },
    "hint": {
        "user": "{ :P :(⇒ P Q) { :P :(⇒ P Q) Q } << Q }",
        "libs": [PROP_LIB],
        "n": 0,
        "description": "A blatant instantiation hint with no instantiation passes",
    },
}
