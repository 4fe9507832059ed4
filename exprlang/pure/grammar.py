"""Recursive-descent parser for the expression language. See lexical.py for the grammar.

Every expression construct is identified by its leading token and is fully parenthesized or bracketed, so expressions
are parsed with a single token of lookahead. The only backtracking is deciding whether the tokens at the cursor start a
function definition or the trailing top-level expression: TokenStream.mark returns the current index and
TokenStream.reset restores it.
"""

from exprlang.lang.error import ParseError
from exprlang.pure.evaluator import evaluate
from exprlang.pure.lexical import Binary, Call, Conditional, Constant, Function, Identifier, Negate, Program
from exprlang.pure.tokens import TokenType, tokenize


class TokenStream:
    """Cursor over an immutable token sequence."""

    def __init__(self, tokens):
        self.tokens = tuple(tokens)
        self.position = 0

    def mark(self):
        """Returns the current position, to be passed back to reset."""
        return self.position

    def reset(self, position):
        self.position = position

    def rewind(self):
        self.position = 0

    def has_next(self):
        return self.position < len(self.tokens)

    def peek(self):
        """Returns next token without consuming it. Raises ParseError if there are no tokens left."""
        if not self.has_next():
            raise ParseError("no next token")
        return self.tokens[self.position]

    def next(self):
        """Consumes and returns next token. Raises ParseError if there are no tokens left."""
        token = self.peek()
        self.position += 1
        return token

    def accept(self, token_type):
        """Consumes next token if it is of token_type. Returns whether or not it was consumed."""
        if self.has_next() and self.tokens[self.position].type is token_type:
            self.position += 1
            return True
        return False

    def expect(self, token_type):
        """Consumes and returns next token, which must be of token_type."""
        token = self.next()
        if token.type is not token_type:
            raise ParseError(f"expected {token_type}, got {token.type}", token)
        return token

    def expect_peek(self, token_type):
        """Returns next token without consuming it, which must be of token_type."""
        token = self.peek()
        if token.type is not token_type:
            raise ParseError(f"expected {token_type}, got {token.type}", token)
        return token


class Parser:
    """Parses a program into its function table and top-level expression. Parsing happens once; compute can be called
    any number of times on the cached Program.
    """

    def __init__(self, source):
        """source is either program text or an iterable of Tokens."""
        if isinstance(source, str):
            source = tokenize(source)
        self.stream = TokenStream(source)

        self.redefined = []  # Functions replaced by a later definition of the same name
        self._program = None

    def parse(self):
        """Returns the parsed Program. Raises ParseError on the first grammar violation."""
        if self._program is None:
            functions = self.parse_function_list()
            expression = self.parse_expression()

            while self.stream.has_next():
                token = self.stream.next()
                if token.type is not TokenType.EOL:
                    raise ParseError(f"unexpected {token.type} after expression", token)

            self._program = Program(functions, expression)
        return self._program

    def compute(self):
        """Parses (if needed) and evaluates the top-level expression."""
        program = self.parse()
        return evaluate(program.expression, program.functions)

    def at_function(self):
        """Whether or not the tokens at the cursor are the start of a function definition: a name, a parenthesized
        list and an "=". Does not move the cursor.
        """
        start = self.stream.mark()
        try:
            if not (self.stream.accept(TokenType.IDENTIFIER) and self.stream.accept(TokenType.OPEN_PAREN)):
                return False

            depth = 1
            while depth > 0:
                if not self.stream.has_next():
                    return False
                token_type = self.stream.next().type
                if token_type is TokenType.OPEN_PAREN:
                    depth += 1
                elif token_type is TokenType.CLOSE_PAREN:
                    depth -= 1

            return self.stream.accept(TokenType.EQUALS)
        finally:
            self.stream.reset(start)

    def parse_function_list(self):
        """Returns dict of name: Function for every definition before the top-level expression. Later definitions of
        the same name replace earlier ones.
        """
        functions = {}
        while self.at_function():
            function = self.parse_function()
            if function.name in functions:
                self.redefined.append(functions[function.name])
            functions[function.name] = function
        return functions

    def parse_function(self):
        name = self.stream.expect(TokenType.IDENTIFIER)
        self.stream.expect(TokenType.OPEN_PAREN)

        parameters = []
        while self.stream.peek().type is not TokenType.CLOSE_PAREN:
            parameters.append(self.stream.expect(TokenType.IDENTIFIER).value)
            self.stream.accept(TokenType.COMMA)

        self.stream.expect(TokenType.CLOSE_PAREN)
        self.stream.expect(TokenType.EQUALS)
        self.stream.expect(TokenType.OPEN_CURLY)
        body = self.parse_expression()
        self.stream.expect(TokenType.CLOSE_CURLY)
        self.stream.expect(TokenType.EOL)  # definitions are always terminated by a line feed

        return Function(name.value, tuple(parameters), body, name.row, name.column)

    def parse_expression(self):
        """Parses one expression, dispatching on its leading token."""
        token = self.stream.peek()

        if token.type is TokenType.OPEN_PAREN:
            return self.parse_binary()
        elif token.type is TokenType.NUMBER:
            self.stream.next()
            return Constant(token.value, token.row, token.column)
        elif token.type is TokenType.OPEN_SQUARE:
            return self.parse_conditional()
        elif token.type is TokenType.OPERATION:
            return self.parse_negate()
        elif token.type is TokenType.IDENTIFIER:
            return self.parse_identifier()

        raise ParseError(f"nothing parsed, got {token.type}", token)

    def parse_binary(self):
        self.stream.expect(TokenType.OPEN_PAREN)
        left = self.parse_expression()
        operation = self.stream.expect(TokenType.OPERATION)
        right = self.parse_expression()
        self.stream.expect(TokenType.CLOSE_PAREN)

        return Binary(operation.value, left, right, left.row, left.column)

    def parse_conditional(self):
        self.stream.expect(TokenType.OPEN_SQUARE)
        condition = self.parse_expression()
        self.stream.expect(TokenType.CLOSE_SQUARE)
        self.stream.expect(TokenType.QUESTION_MARK)
        if_branch = self.parse_block()
        self.stream.expect(TokenType.COLON)
        else_branch = self.parse_block()

        return Conditional(condition, if_branch, else_branch, condition.row, condition.column)

    def parse_block(self):
        """{ <expr> }"""
        self.stream.expect(TokenType.OPEN_CURLY)
        expression = self.parse_expression()
        self.stream.expect(TokenType.CLOSE_CURLY)
        return expression

    def parse_negate(self):
        operation = self.stream.next()
        if operation.value != "-":
            raise ParseError(f"unsupported unary operation '{operation.value}'", operation)

        token = self.stream.peek()
        if token.type is TokenType.NUMBER:
            self.stream.next()
            inner = Constant(token.value, token.row, token.column)
        else:
            self.stream.expect_peek(TokenType.IDENTIFIER)
            inner = self.parse_identifier()

        return Negate(inner, operation.row, operation.column)

    def parse_identifier(self):
        """Parses a parameter reference, or a call if the name is followed by an argument list."""
        name = self.stream.expect(TokenType.IDENTIFIER)
        if not self.stream.accept(TokenType.OPEN_PAREN):
            return Identifier(name.value, name.row, name.column)

        arguments = []
        while self.stream.peek().type is not TokenType.CLOSE_PAREN:
            arguments.append(self.parse_expression())
            self.stream.accept(TokenType.COMMA)
        self.stream.expect(TokenType.CLOSE_PAREN)

        return Call(name.value, tuple(arguments), name.row, name.column)


def parse(source):
    """Returns the Program in source (text or Tokens)."""
    return Parser(source).parse()
