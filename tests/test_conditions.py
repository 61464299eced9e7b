"""Tests for the condition model."""

import pytest

import bttgen
from bttgen.conditions import (
    And,
    Binary,
    BinaryOp,
    BranchPoint,
    ConditionContext,
    ExternalCall,
    Ident,
    Not,
    Or,
)


def test_binary_op_symbols():
    assert BinaryOp.from_symbol(">=") is BinaryOp.GTE
    assert str(BinaryOp.NEQ) == "!="
    with pytest.raises(ValueError):
        BinaryOp.from_symbol("&&")


def test_condition_text():
    gt = Binary("amount", BinaryOp.GT, "0")
    assert str(gt) == "amount > 0"
    assert str(Not(Ident("paused"))) == "!(paused)"
    assert str(And(gt, Ident("open"))) == "(amount > 0) && (open)"
    assert str(Or(Ident("a"), Ident("b"))) == "(a) || (b)"
    assert str(ExternalCall("token.transfer(...)")) == "token.transfer(...)"


def test_conditions_are_hashable_values():
    assert Binary("a", BinaryOp.EQ, "b") == Binary("a", BinaryOp.EQ, "b")
    assert len({Ident("x"), Ident("x"), Not(Ident("x"))}) == 2


def test_context_prefix():
    assert ConditionContext.STORAGE.prefix == "given"
    assert ConditionContext.EXTERNAL.prefix == "when"


def test_branch_point_text():
    bp = BranchPoint(Ident("paused"), ConditionContext.STORAGE, is_loop=True, is_if_revert=True)
    assert str(bp) == "given paused [loop, if-revert]"
    assert str(BranchPoint(Ident("ok"), ConditionContext.EXTERNAL)) == "when ok"


def test_package_pipeline():
    from sol_ast import function, ident, require

    points = bttgen.extract(function("pause", require(ident("open"))), storage_names=["open"])
    assert bttgen.render(bttgen.build("pause", points)) == (
        "pause\n"
        "├── given open is false\n"
        "│   └── it should revert\n"
        "└── given open is true\n"
        "    └── it should succeed\n"
    )
