"""Node type names of the tree-sitter JavaScript/TypeScript grammars used by layout rules."""

PROGRAM = "program"
IF_STATEMENT = "if_statement"
STATEMENT_BLOCK = "statement_block"
SWITCH_CASE = "switch_case"
SWITCH_DEFAULT = "switch_default"
PARENTHESIZED_EXPRESSION = "parenthesized_expression"
BINARY_EXPRESSION = "binary_expression"
TERNARY_EXPRESSION = "ternary_expression"
PAIR = "pair"
OBJECT = "object"
ARRAY = "array"
IDENTIFIER = "identifier"
UNDEFINED = "undefined"
MEMBER_EXPRESSION = "member_expression"
SUBSCRIPT_EXPRESSION = "subscript_expression"
CALL_EXPRESSION = "call_expression"
UNARY_EXPRESSION = "unary_expression"
COMMENT = "comment"
HTML_COMMENT = "html_comment"
ERROR = "ERROR"

LOGICAL_OPERATORS = ("&&", "||")

COMMENT_TYPES = (COMMENT, HTML_COMMENT)

# Nodes whose text is a single token even though the grammar gives them children
ATOMIC_TYPES = ("string", "template_string", "regex", "jsx_text")

# Statement containers: a statement directly inside one of these can have a declaration inserted before it
STATEMENT_CONTAINERS = (PROGRAM, STATEMENT_BLOCK, SWITCH_CASE, SWITCH_DEFAULT)

# Crossing one of these while looking for the enclosing statement changes scope
FUNCTION_BOUNDARIES = (
    "arrow_function",
    "function_expression",
    "function",
    "function_declaration",
    "generator_function",
    "generator_function_declaration",
    "method_definition",
    "class_body",
)

LITERAL_TYPES = (
    "string",
    "template_string",
    "number",
    "true",
    "false",
    "null",
    UNDEFINED,
    "regex",
    "this",
)

JSX_TYPES = ("jsx_element", "jsx_self_closing_element", "jsx_fragment")

# A statement directly under one of these runs once per iteration, or only on one branch
LOOP_TYPES = ("for_statement", "for_in_statement", "while_statement", "do_statement")
ELSE_CLAUSE = "else_clause"

# Statements binding a name in the enclosing block
DECLARATION_TYPES = ("lexical_declaration", "variable_declaration")
VARIABLE_DECLARATOR = "variable_declarator"
NAMED_DECLARATION_TYPES = ("function_declaration", "generator_function_declaration", "class_declaration")
