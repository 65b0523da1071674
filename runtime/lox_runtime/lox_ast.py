"""
Lox AST - Expression and statement nodes

Nodes compare and hash by identity (eq=False): the resolver keys its
scope-distance table on the exact node object, so two structurally equal
references in different places must stay distinct keys.
"""

from typing import Any, List, Optional
from dataclasses import dataclass

from .lox_tokenizer import Token


@dataclass(eq=False)
class ASTNode:
    """Base AST node"""
    pass


# ============================================================================
# Expressions
# ============================================================================

@dataclass(eq=False)
class Expr(ASTNode):
    """Base expression node"""
    pass


@dataclass(eq=False)
class Assign(Expr):
    """Variable assignment: name = value"""
    name: Token
    value: Expr


@dataclass(eq=False)
class BinaryOp(Expr):
    """Arithmetic, comparison or equality operation"""
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Call(Expr):
    """Call expression; paren locates arity and callee errors"""
    callee: Expr
    paren: Token
    arguments: List[Expr]


@dataclass(eq=False)
class GetProperty(Expr):
    """Property access: object.name"""
    object: Expr
    name: Token


@dataclass(eq=False)
class Grouping(Expr):
    """Parenthesized expression"""
    expression: Expr


@dataclass(eq=False)
class Literal(Expr):
    """Literal value"""
    value: Any


@dataclass(eq=False)
class Logical(Expr):
    """Short-circuiting 'and' / 'or'"""
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class SetProperty(Expr):
    """Property assignment: object.name = value"""
    object: Expr
    name: Token
    value: Expr


@dataclass(eq=False)
class SuperRef(Expr):
    """super.method"""
    keyword: Token
    method: Token


@dataclass(eq=False)
class ThisRef(Expr):
    """this"""
    keyword: Token


@dataclass(eq=False)
class UnaryOp(Expr):
    """Unary '-' or '!'"""
    operator: Token
    right: Expr


@dataclass(eq=False)
class Variable(Expr):
    """Variable reference"""
    name: Token


# ============================================================================
# Statements
# ============================================================================

@dataclass(eq=False)
class Stmt(ASTNode):
    """Base statement node"""
    pass


@dataclass(eq=False)
class Block(Stmt):
    """Block of statements with its own scope"""
    statements: List[Stmt]


@dataclass(eq=False)
class FunctionDef(Stmt):
    """Function or method declaration"""
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(eq=False)
class ClassDecl(Stmt):
    """Class declaration with optional superclass"""
    name: Token
    superclass: Optional[Variable]
    methods: List[FunctionDef]


@dataclass(eq=False)
class ExpressionStmt(Stmt):
    """Expression evaluated for its side effects"""
    expression: Expr


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class ReturnStmt(Stmt):
    """Return with optional value; keyword locates resolver errors"""
    keyword: Token
    value: Optional[Expr]


@dataclass(eq=False)
class VarDecl(Stmt):
    """Variable declaration with optional initializer"""
    name: Token
    initializer: Optional[Expr]


@dataclass(eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


__all__ = [
    'ASTNode',
    'Expr',
    'Assign',
    'BinaryOp',
    'Call',
    'GetProperty',
    'Grouping',
    'Literal',
    'Logical',
    'SetProperty',
    'SuperRef',
    'ThisRef',
    'UnaryOp',
    'Variable',
    'Stmt',
    'Block',
    'FunctionDef',
    'ClassDecl',
    'ExpressionStmt',
    'If',
    'Print',
    'ReturnStmt',
    'VarDecl',
    'While',
]
