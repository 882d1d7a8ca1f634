"""
Shared fixture models.

Each fixture returns a ReferenceInterpreter; `as_system` turns one into the
TransitionSystem the traversals consume.
"""
import pytest

from tests.machines import ReferenceInterpreter
from traversal.oracle import TransitionSystem


PEDESTRIAN_STATES = {
    "initial": "walk",
    "states": {
        "walk": {
            "on": {
                "PED_COUNTDOWN": {"target": "wait", "actions": ["startCountdown"]}
            }
        },
        "wait": {"on": {"PED_COUNTDOWN": "stop"}},
        "stop": {},
        "flashing": {},
    },
}

LIGHT_MACHINE = {
    "key": "light",
    "initial": "green",
    "states": {
        "green": {
            "on": {
                "TIMER": "yellow",
                "POWER_OUTAGE": "red.flashing",
                # pushing the walk button never does anything
                "PUSH_BUTTON": [{"actions": ["doNothing"]}],
            }
        },
        "yellow": {
            "on": {
                "TIMER": "red",
                "POWER_OUTAGE": "#light.red.flashing",
            }
        },
        "red": {
            "on": {
                "TIMER": "green",
                "POWER_OUTAGE": "red.flashing",
            },
            **PEDESTRIAN_STATES,
        },
    },
}

PARALLEL_MACHINE = {
    "type": "parallel",
    "key": "p",
    "states": {
        "a": {
            "initial": "a1",
            "states": {
                "a1": {"on": {"2": "a2", "3": "a3"}},
                "a2": {"on": {"3": "a3", "1": "a1"}},
                "a3": {},
            },
        },
        "b": {
            "initial": "b1",
            "states": {
                "b1": {"on": {"2": "b2", "3": "b3"}},
                "b2": {"on": {"3": "b3", "1": "b1"}},
                "b3": {},
            },
        },
    },
}

COND_MACHINE = {
    "key": "cond",
    "initial": "pending",
    "states": {
        "pending": {
            "on": {
                "EVENT": [
                    {"target": "foo", "cond": lambda ctx, e: e.get("id") == "foo"},
                    {"target": "bar"},
                ],
                "STATE": [
                    {"target": "foo", "cond": lambda ctx, e: ctx["id"] == "foo"},
                    {"target": "bar"},
                ],
            }
        },
        "foo": {},
        "bar": {},
    },
}

EQUIV_MACHINE = {
    "initial": "a",
    "states": {
        "a": {"on": {"FOO": "b", "BAR": "b"}},
        "b": {"on": {"FOO": "a", "BAR": "a"}},
    },
}


def increment(ctx, event):
    return {**ctx, "count": ctx["count"] + event.get("value", 1)}


def decrement(ctx, event):
    return {**ctx, "count": ctx["count"] - 1}


COUNT_MACHINE = {
    "id": "count",
    "initial": "start",
    "states": {
        "start": {
            "on": {
                "": {"target": "finish", "cond": lambda ctx, e: ctx["count"] == 3},
                "INC": {"actions": ["increment"]},
            }
        },
        "finish": {},
    },
}

COUNTER_MACHINE = {
    "id": "counter",
    "initial": "empty",
    "states": {
        "empty": {
            "on": {
                "": {"target": "full", "cond": lambda ctx, e: ctx["count"] == 5},
                "INC": {"actions": ["increment"]},
                "DEC": {"actions": ["decrement"]},
            }
        },
        "full": {},
    },
}

# No terminal state: the context space is unbounded without a filter
TICKER_MACHINE = {
    "id": "ticker",
    "initial": "counting",
    "states": {
        "counting": {
            "on": {
                "INC": {"actions": ["increment"]},
                "DEC": {"actions": ["decrement"]},
            }
        },
    },
}

COUNTER_ACTIONS = {"increment": increment, "decrement": decrement}


def as_system(machine: ReferenceInterpreter) -> TransitionSystem:
    return TransitionSystem(machine.structure, machine.transition, machine.initial_state())


@pytest.fixture
def light_machine():
    return ReferenceInterpreter(LIGHT_MACHINE)


@pytest.fixture
def parallel_machine():
    return ReferenceInterpreter(PARALLEL_MACHINE)


@pytest.fixture
def cond_machine():
    return ReferenceInterpreter(COND_MACHINE, context={"id": "foo"})


@pytest.fixture
def equiv_machine():
    return ReferenceInterpreter(EQUIV_MACHINE)


@pytest.fixture
def count_machine():
    return ReferenceInterpreter(COUNT_MACHINE, actions=COUNTER_ACTIONS, context={"count": 0})


@pytest.fixture
def counter_machine():
    return ReferenceInterpreter(COUNTER_MACHINE, actions=COUNTER_ACTIONS, context={"count": 0})


@pytest.fixture
def ticker_machine():
    return ReferenceInterpreter(TICKER_MACHINE, actions=COUNTER_ACTIONS, context={"count": 0})


@pytest.fixture
def light_system(light_machine):
    return as_system(light_machine)


@pytest.fixture
def parallel_system(parallel_machine):
    return as_system(parallel_machine)
