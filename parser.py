"""
Parser for the opslang surface syntax.

Overview and approach:
- The notation is fully parenthesised, so a small hand-written recursive
    descent parser is enough: there is no precedence to resolve. Every operand
    is a parenthesised statement `( op )` and every statement list is a
    parenthesised run of statements.

Grammar:
    program   := (fn_def | stmt)+          at least one stmt
    fn_def    := "(" "fn" NAME "(" (NAME ":" INT)* ")" block ")"
    block     := "(" stmt+ ")"
    stmt      := "(" op ")"
    op        := INT                        constant
               | "#" INT                    variable read
               | "set" INT stmt             variable write
               | BINOP stmt stmt            + - * / & | > < >= <= = && ||
               | "if" stmt block block
               | "range" INT stmt stmt block
               | NAME stmt*                 function call

Key points:
- Statement lists (`block`, the top-level statements, function bodies) are
    desugared into a right-associated `SeqNode` chain via `builder.seq`.
- Function definitions may appear anywhere at top level and may be called
    before they are defined; name resolution happens once the whole program
    has been read (`Resolver.check_program`).

Example:
    (fn Add (A:1 B:2) ((+ (#1) (#2))))
    (set 1 (Add (6) (5)))
    (#1)
"""

from __future__ import annotations
from typing import Dict, List, Optional
from tokens import Token, TokenType
from ast_nodes import *
from builder import binary, seq
from errors import ProgramError
from lexer import Lexer
from resolver import Resolver


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.current = tokens[0] if tokens else Token(TokenType.EOF, None)
        self.functions: Dict[str, FunctionDef] = {}

        self.operators: Dict[TokenType, Operator] = {
            TokenType.PLUS: Operator.ADD,
            TokenType.MINUS: Operator.SUB,
            TokenType.STAR: Operator.MUL,
            TokenType.SLASH: Operator.DIV,
            TokenType.AMP: Operator.BIT_AND,
            TokenType.PIPE: Operator.BIT_OR,
            TokenType.GT: Operator.GT,
            TokenType.LT: Operator.LT,
            TokenType.GTE: Operator.GTE,
            TokenType.LTE: Operator.LTE,
            TokenType.EQ: Operator.EQU,
            TokenType.AND: Operator.AND,
            TokenType.OR: Operator.OR,
        }

    def peek(self) -> Token:
        """Return the token after the current one without consuming anything."""
        nxt = self.pos + 1
        return (
            self.tokens[nxt]
            if nxt < len(self.tokens)
            else Token(TokenType.EOF, None)
        )

    def advance(self) -> Token:
        """Move to next token."""
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Token(TokenType.EOF, None)
        return self.current

    def error(self, message: str, token: Optional[Token] = None) -> SyntaxError:
        token = token or self.current
        return SyntaxError(
            f"Parse error at line {token.line}, column {token.column}: {message}"
        )

    def expect(self, expected_type: TokenType, message: Optional[str] = None) -> Token:
        """Expect and consume token of given type."""
        if self.current.type == expected_type:
            token = self.current
            self.advance()
            return token

        msg = message or f"Expected {expected_type}, got {self.current.type}"
        raise self.error(msg)

    def parse_var_id(self) -> int:
        token = self.expect(TokenType.INTEGER, "Expected variable id")
        if token.value < 0:
            raise self.error(f"Variable id must be non-negative, got {token.value}", token)
        return token.value

    def parse_statement(self) -> ASTNode:
        """Parse a statement: ( op )"""
        open_tok = self.expect(TokenType.LPAREN, "Expected '(' to start a statement")
        node = self.parse_op(open_tok)
        self.expect(TokenType.RPAREN, "Expected ')' to close a statement")
        return node

    def parse_block(self) -> ASTNode:
        """Parse a statement list: ( stmt+ )"""
        self.expect(TokenType.LPAREN, "Expected '(' to start a statement list")
        statements: List[ASTNode] = []

        while self.current.type == TokenType.LPAREN:
            statements.append(self.parse_statement())

        if not statements:
            raise self.error("Statement list must contain at least one statement")

        self.expect(TokenType.RPAREN, "Expected ')' to close a statement list")
        return seq(*statements)

    def parse_op(self, open_tok: Token) -> ASTNode:
        """Parse the contents of a statement (everything inside the parens)."""
        token = self.current
        pos = {"line": open_tok.line, "column": open_tok.column}

        match token.type:
            case TokenType.INTEGER:
                self.advance()
                return ConstNode(value=token.value, **pos)

            case TokenType.HASH:
                self.advance()
                return GetVarNode(var_id=self.parse_var_id(), **pos)

            case TokenType.SET:
                self.advance()
                var_id = self.parse_var_id()
                value = self.parse_statement()
                return SetVarNode(var_id=var_id, value=value, **pos)

            case TokenType.IF:
                self.advance()
                condition = self.parse_statement()
                then_branch = self.parse_block()
                else_branch = self.parse_block()
                return IfElseNode(
                    condition=condition,
                    then_branch=then_branch,
                    else_branch=else_branch,
                    **pos,
                )

            case TokenType.RANGE:
                self.advance()
                var_id = self.parse_var_id()
                start = self.parse_statement()
                stop = self.parse_statement()
                body = self.parse_block()
                return RangeNode(var_id=var_id, start=start, stop=stop, body=body, **pos)

            case TokenType.IDENTIFIER:
                self.advance()
                args: List[ASTNode] = []
                while self.current.type == TokenType.LPAREN:
                    args.append(self.parse_statement())
                return CallNode(func_name=token.value, arguments=tuple(args), **pos)

            case TokenType.FN:
                raise self.error("Function definitions are only allowed at top level")

            case t if t in self.operators:
                self.advance()
                left = self.parse_statement()
                right = self.parse_statement()
                return binary(self.operators[t], left, right, **pos)

            case _:
                raise self.error(f"Unexpected token: {token}")

    def parse_function(self) -> FunctionDef:
        """Parse a function definition: ( fn NAME ( NAME:INT* ) block )"""
        open_tok = self.expect(TokenType.LPAREN)
        self.expect(TokenType.FN)
        name_tok = self.expect(TokenType.IDENTIFIER, "Expected function name")

        self.expect(TokenType.LPAREN, "Expected '(' before parameter list")
        params: List[Parameter] = []
        while self.current.type == TokenType.IDENTIFIER:
            pname = self.current.value
            self.advance()
            self.expect(TokenType.COLON, f"Expected ':' after parameter '{pname}'")
            params.append(Parameter(name=pname, var_id=self.parse_var_id()))
        self.expect(TokenType.RPAREN, "Expected ')' after parameter list")

        body = self.parse_block()
        self.expect(TokenType.RPAREN, "Expected ')' to close function definition")

        if name_tok.value in self.functions:
            raise ProgramError(
                f"Function '{name_tok.value}' already defined (line {name_tok.line})"
            )
        fdef = FunctionDef(
            name=name_tok.value,
            params=tuple(params),
            body=body,
            line=open_tok.line,
            column=open_tok.column,
        )
        self.functions[fdef.name] = fdef
        return fdef

    def parse(self) -> Program:
        """Parse a complete program: function definitions plus top-level statements."""
        statements: List[ASTNode] = []

        while self.current.type != TokenType.EOF:
            if self.current.type == TokenType.LPAREN and self.peek().type == TokenType.FN:
                self.parse_function()
            else:
                statements.append(self.parse_statement())

        if not statements:
            raise self.error("Program must contain at least one statement")

        return Program(root=seq(*statements), functions=dict(self.functions))


def parse_program(text: str, word_bits: int = 64) -> Program:
    """Lex, parse and resolve `text` into a Program ready for `interpreter.run`."""
    program = Parser(Lexer(text).tokenize()).parse()
    Resolver.check_program(program, word_bits=word_bits)
    return program
