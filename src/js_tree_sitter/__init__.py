from .parser import JSParser
from .ast_walker import ASTWalker
from .source_view import SourceView
from .models import ParseResult, Token

__all__ = ["JSParser", "ASTWalker", "SourceView", "ParseResult", "Token"]
