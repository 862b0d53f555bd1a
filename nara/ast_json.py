"""JSON serialization/deserialization for the Nara AST.

This module converts between Nara AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types. F-string interpolations are kept as source
text, exactly as the parser leaves them.
"""

from __future__ import annotations

import math
from typing import Any, Dict

from .ast import (
    Program,
    Number,
    Float,
    Str,
    Bool,
    FString,
    FStringText,
    FStringInterpolation,
    ListLit,
    BinaryOp,
    UnaryOp,
    If,
    While,
    For,
    FuncCall,
    BindingUsage,
    Block,
    BindingDef,
    FunctionDef,
    ExprStmt,
    Op,
    UnaryOperator,
)


def float_to_obj(value: float) -> Any:
    # JSON has no inf/nan; the parser never produces them but keep the codec total
    if math.isfinite(value):
        return value
    return {"__float__": repr(value)}


def float_from_obj(obj: Any) -> float:
    if isinstance(obj, dict):
        return float(obj["__float__"])
    return float(obj)


def fstring_part_to_obj(part: Any) -> Dict[str, Any]:
    if isinstance(part, FStringText):
        return {"type": "Text", "text": part.text}
    return {"type": "Interpolation", "source": part.source}


def fstring_part_from_obj(o: Dict[str, Any]) -> Any:
    if o["type"] == "Text":
        return FStringText(o["text"])
    if o["type"] == "Interpolation":
        return FStringInterpolation(o["source"])
    raise ValueError(f"Unknown f-string part type: {o['type']}")


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, BindingDef):
        return {"type": "BindingDef", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, FunctionDef):
        return {
            "type": "FunctionDef",
            "name": node.name,
            "params": list(node.params),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "expr": ast_to_obj(node.expr)}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, Number):
        return {"type": "Number", "value": node.value}
    if isinstance(node, Float):
        return {"type": "Float", "value": float_to_obj(node.value)}
    if isinstance(node, Str):
        return {"type": "Str", "value": node.value}
    if isinstance(node, Bool):
        return {"type": "Bool", "value": node.value}
    if isinstance(node, FString):
        return {"type": "FString", "parts": [fstring_part_to_obj(p) for p in node.parts]}
    if isinstance(node, ListLit):
        return {"type": "ListLit", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op.value, "lhs": ast_to_obj(node.lhs), "rhs": ast_to_obj(node.rhs)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op.value, "operand": ast_to_obj(node.operand)}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_block": ast_to_obj(node.then_block),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, While):
        return {"type": "While", "condition": ast_to_obj(node.condition), "body": ast_to_obj(node.body)}
    if isinstance(node, For):
        return {
            "type": "For",
            "name": node.name,
            "iterable": ast_to_obj(node.iterable),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, FuncCall):
        return {"type": "FuncCall", "name": node.name, "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, BindingUsage):
        return {"type": "BindingUsage", "name": node.name}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "BindingDef":
        return BindingDef(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "FunctionDef":
        return FunctionDef(name=obj["name"], params=list(obj["params"]), body=ast_from_obj(obj["body"]))
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]))
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "Number":
        return Number(int(obj["value"]))
    if t == "Float":
        return Float(float_from_obj(obj["value"]))
    if t == "Str":
        return Str(obj["value"])
    if t == "Bool":
        return Bool(bool(obj["value"]))
    if t == "FString":
        return FString(parts=[fstring_part_from_obj(p) for p in obj["parts"]])
    if t == "ListLit":
        return ListLit(elements=[ast_from_obj(e) for e in obj["elements"]])
    if t == "BinaryOp":
        return BinaryOp(lhs=ast_from_obj(obj["lhs"]), rhs=ast_from_obj(obj["rhs"]), op=Op(obj["op"]))
    if t == "UnaryOp":
        return UnaryOp(operand=ast_from_obj(obj["operand"]), op=UnaryOperator(obj["op"]))
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_block=ast_from_obj(obj["then_block"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
        )
    if t == "While":
        return While(condition=ast_from_obj(obj["condition"]), body=ast_from_obj(obj["body"]))
    if t == "For":
        return For(name=obj["name"], iterable=ast_from_obj(obj["iterable"]), body=ast_from_obj(obj["body"]))
    if t == "FuncCall":
        return FuncCall(name=obj["name"], args=[ast_from_obj(a) for a in obj["args"]])
    if t == "BindingUsage":
        return BindingUsage(name=obj["name"])

    raise ValueError(f"Unknown AST node type: {t}")
