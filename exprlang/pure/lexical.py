"""Abstract syntax tree of the expression language.

Formally, the language can be defined as

```
<program>    ::= <function>* <expr> EOL*
<function>   ::= <name> "(" [<name> [","]]* ")" "=" "{" <expr> "}" EOL
<expr>       ::= <number>
               | "-" <number>
               | "-" <name> [<arguments>]
               | <name> [<arguments>]
               | "(" <expr> <operation> <expr> ")"
               | "[" <expr> "]" "?" "{" <expr> "}" ":" "{" <expr> "}"
<arguments>  ::= "(" [<expr> [","]]* ")"
<operation>  ::= "+" | "-" | "*" | "/" | "%" | "<" | ">"
```

Grouping is always explicit, so there is no operator precedence. Nodes are immutable once built; str(node) gives the
canonical rendering that runtime errors report.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


class ExpressionNode:
    """Superclass of every expression node. row and column are those of the token the node is positioned at."""
    row: int
    column: int

    @property
    def nodes(self):
        """Direct sub-expressions, in evaluation order."""
        return ()

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(expr='<expr>', nodes=[
            <Node>(expr='<expr>', nodes=[
                ...
                <Node>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}(expr='{self}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


@dataclass(frozen=True)
class Constant(ExpressionNode):
    value: int
    row: int = 0
    column: int = 0

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Negate(ExpressionNode):
    """Unary minus. Only applies to numbers, identifiers and calls."""
    inner: ExpressionNode
    row: int = 0
    column: int = 0

    @property
    def nodes(self):
        return (self.inner,)

    def __str__(self):
        return f"-{self.inner}"


@dataclass(frozen=True)
class Binary(ExpressionNode):
    """(left operation right). Positioned at its left operand."""
    operation: str
    left: ExpressionNode
    right: ExpressionNode
    row: int = 0
    column: int = 0

    @property
    def nodes(self):
        return self.left, self.right

    def __str__(self):
        return f"({self.left}{self.operation}{self.right})"


@dataclass(frozen=True)
class Conditional(ExpressionNode):
    """[condition]?{if_branch}:{else_branch}. Positioned at its condition."""
    condition: ExpressionNode
    if_branch: ExpressionNode
    else_branch: ExpressionNode
    row: int = 0
    column: int = 0

    @property
    def nodes(self):
        return self.condition, self.if_branch, self.else_branch

    def __str__(self):
        return f"[{self.condition}]?{{{self.if_branch}}}:{{{self.else_branch}}}"


@dataclass(frozen=True)
class Identifier(ExpressionNode):
    name: str
    row: int = 0
    column: int = 0

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Call(ExpressionNode):
    name: str
    arguments: Tuple[ExpressionNode, ...] = ()
    row: int = 0
    column: int = 0

    @property
    def nodes(self):
        return self.arguments

    def __str__(self):
        return self.name + "(" + "".join(f"{argument}," for argument in self.arguments) + ")"


@dataclass(frozen=True)
class Function:
    """Named function definition: name(parameters)={body}."""
    name: str
    parameters: Tuple[str, ...]
    body: ExpressionNode
    row: int = 0
    column: int = 0

    @property
    def arity(self):
        return len(self.parameters)

    def __str__(self):
        return f"{self.name}({','.join(self.parameters)})={{{self.body}}}"


@dataclass(frozen=True)
class Program:
    """Parser output: function table plus the single top-level expression."""
    functions: Dict[str, Function]
    expression: ExpressionNode
