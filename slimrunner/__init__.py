"""Sequential test runner with hooks, timeouts, bail and pluggable reporters.

The module level functions declare into the process default suite::

    from slimrunner import group, test

    def math(g):
        g.before(setup)
        g.test("adds two numbers", adds)

    group("math", math)
"""

from slimrunner.assertion import Assert
from slimrunner.emitter import Emitter
from slimrunner.group import Group
from slimrunner.runner import Runner, RunnerContext
from slimrunner.suite import Suite, default_suite
from slimrunner.test import Test

configure = default_suite.configure
test = default_suite.test
skip = default_suite.skip
skip_in_ci = default_suite.skip_in_ci
run_in_ci = default_suite.run_in_ci
failing = default_suite.failing
todo = default_suite.todo
group = default_suite.group
run = default_suite.run

__all__ = [
    "Assert",
    "Emitter",
    "Group",
    "Runner",
    "RunnerContext",
    "Suite",
    "Test",
    "configure",
    "default_suite",
    "failing",
    "group",
    "run",
    "run_in_ci",
    "skip",
    "skip_in_ci",
    "test",
    "todo",
]
